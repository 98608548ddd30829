"""Label layout for the payoff matrix.

Each activity gets a dot at its mapped coordinate and a text label anchored
25 units above it. Labels are then walked top to bottom and any label that
collides with one already placed above it is pushed down 30 units. It is a
single greedy pass: a push is never re-checked, so heavy clusters can still
overlap. That is accepted at this chart's scale (a few dozen activities).
"""

from dataclasses import dataclass
from functools import lru_cache

from reflection_portal.matrix.coordinates import CoordinateMapper
from reflection_portal.matrix.quadrants import classify
from reflection_portal.matrix.scale import ScaleConfig

LABEL_OFFSET = 25          # initial anchor height above the dot
LABEL_STEP = 30            # push distance, also the vertical collision threshold
CHAR_WIDTH = 16            # estimated rendered width per character
LABEL_GAP = 10             # minimum horizontal clearance between labels


@dataclass(frozen=True)
class ActivityPoint:
    id: str
    activity: str
    importance: float
    satisfaction: float
    proposer: str = ""
    grade: str = ""
    memo: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "ActivityPoint":
        return cls(
            id=str(record.get("id", "")),
            activity=record.get("activity") or "",
            importance=float(record.get("importance") or 0),
            satisfaction=float(record.get("satisfaction") or 0),
            proposer=record.get("proposer") or "",
            grade=record.get("grade") or "",
            memo=record.get("memo") or "",
        )



@dataclass(frozen=True)
class LabelNode:
    point: ActivityPoint
    x: float
    y: float
    lx: float
    ly: float
    quadrant: dict

    @property
    def label_width(self) -> float:
        return label_width(self.point.activity)


def label_width(text: str) -> float:
    return len(text) * CHAR_WIDTH


def compute_layout(points, scale: ScaleConfig) -> list[LabelNode]:
    """Place every point and resolve label collisions.

    Returns nodes sorted top to bottom (ascending y). Pure: the same points
    and scale always give the same nodes.
    """
    mapper = CoordinateMapper(scale)
    placed = sorted(
        ((point, mapper.x(point.importance), mapper.y(point.satisfaction)) for point in points),
        key=lambda p: p[2],
    )

    widths = [label_width(point.activity) for point, _, _ in placed]
    anchors_x = [x for _, x, _ in placed]
    anchors_y = [y - LABEL_OFFSET for _, _, y in placed]

    for i in range(len(placed)):
        for j in range(i):
            x_dist = abs(anchors_x[i] - anchors_x[j])
            y_dist = abs(anchors_y[i] - anchors_y[j])
            if x_dist < (widths[i] / 2 + widths[j] / 2 + LABEL_GAP) and y_dist < LABEL_STEP:
                anchors_y[i] += LABEL_STEP

    return [
        LabelNode(
            point=point,
            x=x,
            y=y,
            lx=anchors_x[i],
            ly=anchors_y[i],
            quadrant=classify(point.importance, point.satisfaction, scale.midpoint),
        )
        for i, (point, x, y) in enumerate(placed)
    ]


@lru_cache(maxsize=64)
def _cached_layout(points: tuple, scale: ScaleConfig) -> tuple:
    return tuple(compute_layout(points, scale))


def layout_for(points, scale: ScaleConfig) -> list[LabelNode]:
    """Memoized compute_layout keyed on the (points, scale) inputs."""
    return list(_cached_layout(tuple(points), scale))
