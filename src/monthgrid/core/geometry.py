"""Plain geometry values and edge-proximity detection."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in host coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, point: Point) -> bool:
        return self.left <= point.x < self.right and self.top <= point.y < self.bottom


class NavigationEdge(Enum):
    """Grid edge that pages backwards (leading) or forwards (trailing)."""

    LEADING = "leading"
    TRAILING = "trailing"


def detect_edge(x: float, bounds: Rect, threshold: float) -> NavigationEdge | None:
    """Which proximity zone x falls in, if any."""
    if bounds.width <= 0 or threshold <= 0:
        return None
    local_x = x - bounds.left
    if local_x < threshold:
        return NavigationEdge.LEADING
    if local_x > bounds.width - threshold:
        return NavigationEdge.TRAILING
    return None
