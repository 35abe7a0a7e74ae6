"""Pointer-to-cell mapping and drop highlight construction - no I/O dependencies."""

import math
from dataclasses import dataclass
from datetime import date

from .dates import add_days
from .geometry import Rect
from .packing import DAYS_PER_WEEK


@dataclass(frozen=True)
class HighlightCellInfo:
    """A grid cell under a proposed drop or resize."""

    date: date
    cell_index: int
    week_row_index: int
    bounds: Rect
    is_first: bool
    is_last: bool


def drop_start_cell_index(local_x: float, grab_offset_x: float, day_width: float) -> int | None:
    """
    Column of the dragged item's leading day, center-weighted.

    The half-day shift means the target only changes once the tile's first
    day has crossed the midpoint of a cell. grab_offset_x already includes
    any margin captured at drag start. None for degenerate widths.
    """
    if day_width <= 0:
        return None
    return math.floor((local_x - grab_offset_x + day_width / 2) / day_width)


def cell_index_at(local_x: float, day_width: float) -> int | None:
    """Column directly under local_x, clamped to the week."""
    if day_width <= 0:
        return None
    return min(max(math.floor(local_x / day_width), 0), DAYS_PER_WEEK - 1)


def proposed_drop_range(
    row_base_date: date,
    start_cell_index: int,
    duration_days: int,
) -> tuple[date, date]:
    """Start/end days of a drop starting start_cell_index days after the row's first date."""
    start = add_days(row_base_date, start_cell_index)
    return start, add_days(start, max(duration_days, 1) - 1)


def build_highlighted_cells(
    start_cell_index: int,
    duration_days: int,
    week_row_index: int,
    total_rows: int,
    day_width: float,
    week_row_bounds,
    week_dates,
) -> tuple[HighlightCellInfo, ...]:
    """
    Cells covered by a span of duration_days starting at (week_row_index, start_cell_index).

    Wraps to the next row after column 6 and to previous rows for negative
    start indexes. Days falling above or below the visible rows produce no
    cell; walking stops at the bottom. is_first/is_last mark the span's true
    first and last day, so they are absent when that day is off-grid.

    week_row_bounds and week_dates are the geometry accessors
    (row index -> Rect, row index -> dates). Returns a new tuple every call.
    """
    if duration_days <= 0 or total_rows <= 0 or day_width <= 0:
        return ()

    cells = []
    first_index = week_row_index * DAYS_PER_WEEK + start_cell_index
    last_grid_index = total_rows * DAYS_PER_WEEK

    row_cache: dict[int, tuple[Rect, list[date]]] = {}
    for offset in range(duration_days):
        grid_index = first_index + offset
        if grid_index < 0:
            continue
        if grid_index >= last_grid_index:
            break

        row, column = divmod(grid_index, DAYS_PER_WEEK)
        if row not in row_cache:
            row_cache[row] = (week_row_bounds(row), list(week_dates(row)))
        bounds, dates = row_cache[row]
        if column >= len(dates):
            continue

        cells.append(
            HighlightCellInfo(
                date=dates[column],
                cell_index=column,
                week_row_index=row,
                bounds=Rect(
                    left=bounds.left + column * day_width,
                    top=bounds.top,
                    width=day_width,
                    height=bounds.height,
                ),
                is_first=offset == 0,
                is_last=offset == duration_days - 1,
            )
        )

    return tuple(cells)
