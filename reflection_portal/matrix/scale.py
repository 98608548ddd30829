"""Axis scale for the payoff matrix — ticks, midpoint, validation."""

import math
from dataclasses import dataclass

from reflection_portal.errors import InvalidScaleConfig

DEFAULT_MIN = -5.0
DEFAULT_MAX = 5.0
DEFAULT_INTERVAL = 1.0

# Upper bound on ticks per axis; each tick is a grid line and a select option
MAX_TICKS = 200


@dataclass(frozen=True)
class ScaleConfig:
    """Shared scale for both axes (importance and satisfaction)."""

    min: float = DEFAULT_MIN
    max: float = DEFAULT_MAX
    interval: float = DEFAULT_INTERVAL

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidScaleConfig unless min < max, interval > 0 and ticks fit MAX_TICKS."""
        for name in ("min", "max", "interval"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
                raise InvalidScaleConfig(f"{name} must be a finite number, got {value!r}")
        if self.interval <= 0:
            raise InvalidScaleConfig(f"interval must be greater than 0, got {self.interval}")
        if self.min >= self.max:
            raise InvalidScaleConfig(f"min ({self.min}) must be less than max ({self.max})")
        if self.span / self.interval + 1 > MAX_TICKS:
            raise InvalidScaleConfig(
                f"interval {self.interval} gives more than {MAX_TICKS} ticks between {self.min} and {self.max}"
            )

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    @property
    def span(self) -> float:
        return self.max - self.min

    def ticks(self) -> list[float]:
        """Ascending tick values from min, stepping by interval, up to max."""
        count = math.floor(self.span / self.interval + 1e-9) + 1
        ticks = []
        for k in range(count):
            value = self.min + k * self.interval
            if value > self.max:
                # float error on the last step, e.g. 9 * 0.1 > 0.9
                if not math.isclose(value, self.max, rel_tol=1e-9, abs_tol=1e-12):
                    break
                value = self.max
            ticks.append(value)
        return ticks

    def is_midpoint(self, value: float) -> bool:
        return math.isclose(value, self.midpoint, abs_tol=1e-9)

    def as_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "interval": self.interval}

    @classmethod
    def from_form(cls, min_value, max_value, interval) -> "ScaleConfig":
        """Build a scale from raw form/session values (strings or numbers)."""
        try:
            values = [float(v) for v in (min_value, max_value, interval)]
        except (TypeError, ValueError) as e:
            raise InvalidScaleConfig(f"scale values must be numbers: {e}") from e
        return cls(*values)


def format_tick(value: float) -> str:
    """Render a tick compactly: 1.0 -> '1', 0.1234567 -> '0.1234567'.

    Twelve significant digits keep user-entered values exact while hiding
    float noise such as 0.30000000000000004.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.12g}"
