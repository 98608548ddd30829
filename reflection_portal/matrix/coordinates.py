"""Scale value <-> chart canvas coordinates.

The chart is drawn in a fixed 1000x1000 logical SVG space with 100 units of
padding on every side. The vertical axis is inverted: larger values sit
higher on the canvas (smaller y).
"""

from dataclasses import dataclass

from reflection_portal.matrix.scale import ScaleConfig

CHART_SIZE = 1000
PADDING = 100


@dataclass(frozen=True)
class CoordinateMapper:
    scale: ScaleConfig
    size: float = CHART_SIZE
    padding: float = PADDING

    @property
    def plot_size(self) -> float:
        return self.size - 2 * self.padding

    def _fraction(self, value: float) -> float:
        return (value - self.scale.min) / self.scale.span

    def x(self, value: float) -> float:
        return self.padding + self._fraction(value) * self.plot_size

    def y(self, value: float) -> float:
        return self.size - self.padding - self._fraction(value) * self.plot_size

    def value_at_x(self, x: float) -> float:
        return self.scale.min + (x - self.padding) / self.plot_size * self.scale.span

    def value_at_y(self, y: float) -> float:
        return self.scale.min + (self.size - self.padding - y) / self.plot_size * self.scale.span

    @property
    def mid_x(self) -> float:
        return self.x(self.scale.midpoint)

    @property
    def mid_y(self) -> float:
        return self.y(self.scale.midpoint)
