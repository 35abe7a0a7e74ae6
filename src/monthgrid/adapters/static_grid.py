"""Static grid geometry - arithmetic cell layout for a fixed-size month grid."""

from dataclasses import dataclass, field
from datetime import date

from monthgrid.core.geometry import Point, Rect


@dataclass
class StaticGridGeometry:
    """
    Uniform month grid anchored at (left, top).

    Implements GridGeometry protocol. Useful for hosts with fixed cell sizes
    and for driving a DragSession headlessly.
    """

    dates: list[date]
    day_width: float
    row_height: float
    left: float = 0.0
    top: float = 0.0
    _rows: list[list[date]] = field(init=False, repr=False)

    def __post_init__(self):
        self._rows = [self.dates[i : i + 7] for i in range(0, len(self.dates) - 6, 7)]

    @property
    def total_rows(self) -> int:
        return len(self._rows)

    @property
    def bounds(self) -> Rect:
        return Rect(self.left, self.top, self.day_width * 7, self.row_height * self.total_rows)

    def week_row_bounds(self, week_row_index: int) -> Rect:
        return Rect(
            left=self.left,
            top=self.top + week_row_index * self.row_height,
            width=self.day_width * 7,
            height=self.row_height,
        )

    def week_dates(self, week_row_index: int) -> list[date]:
        if not 0 <= week_row_index < self.total_rows:
            return []
        return self._rows[week_row_index]

    def row_at(self, point: Point) -> int | None:
        """Week row under a point, or None outside the grid."""
        if self.row_height <= 0 or not self.bounds.contains(point):
            return None
        return int((point.y - self.top) // self.row_height)

    def cell_center(self, week_row_index: int, column: int) -> Point:
        row = self.week_row_bounds(week_row_index)
        return Point(row.left + (column + 0.5) * self.day_width, row.top + row.height / 2)
