"""Month grid geometry interface."""

from datetime import date
from typing import Protocol, Sequence

from monthgrid.core.geometry import Rect


class GridGeometry(Protocol):
    """Interface for reading the rendered grid's layout from the host."""

    @property
    def day_width(self) -> float:
        """Width of one day cell."""
        ...

    @property
    def total_rows(self) -> int:
        """Number of visible week rows."""
        ...

    def week_row_bounds(self, week_row_index: int) -> Rect:
        """Bounds of a week row in the pointer's coordinate space."""
        ...

    def week_dates(self, week_row_index: int) -> Sequence[date]:
        """The 7 dates of a week row."""
        ...
