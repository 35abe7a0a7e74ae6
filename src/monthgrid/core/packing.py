"""Greedy first-fit row packing of event segments - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .events import CalendarEvent
from .segments import EventSegment, calculate_layouts, segments_by_week

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class LayoutAssignment:
    """A segment placed on a row of its week."""

    event: CalendarEvent
    segment: EventSegment
    row: int
    start_column: int
    end_column: int

    @property
    def column_span(self) -> int:
        return self.end_column - self.start_column + 1

    def overlaps(self, other: "LayoutAssignment") -> bool:
        """Same row and intersecting column ranges."""
        return (
            self.row == other.row
            and self.start_column <= other.end_column
            and other.start_column <= self.end_column
        )


@dataclass
class WeekLayoutFrame:
    """Packed layout of one week row."""

    week_row_index: int
    week_dates: list[date]
    assignments: list[LayoutAssignment] = field(default_factory=list)
    total_rows: int = 0
    column_max_rows: dict[int, int] = field(default_factory=dict)

    def max_row_at_column(self, column: int) -> int:
        """Highest row used at column, or -1 when the column is free."""
        return self.column_max_rows.get(column, -1)

    def row_count_at_column(self, column: int) -> int:
        return self.max_row_at_column(column) + 1


@dataclass(frozen=True)
class OverflowInfo:
    """Events that fit / do not fit in a day column."""

    visible_events: list[CalendarEvent]
    hidden_events: list[CalendarEvent]

    @property
    def hidden_count(self) -> int:
        return len(self.hidden_events)


def pack_week(
    segments: list[EventSegment],
    week_row_index: int,
    week_dates: list[date] | None = None,
) -> WeekLayoutFrame:
    """
    Assign rows to one week's segments with greedy first-fit.

    Segments must already be in rendering order. Each takes the lowest row
    that is free at every column it spans. Only locally optimal per week: a
    multi-week event may land on different rows in different weeks.
    """
    frame = WeekLayoutFrame(week_row_index=week_row_index, week_dates=list(week_dates or []))
    if not segments:
        return frame

    # occupancy[column] = rows already taken at that column
    occupancy: list[set[int]] = [set() for _ in range(DAYS_PER_WEEK)]
    assignments = []

    for segment in segments:
        start_col = segment.start_day_in_week
        end_col = segment.end_day_in_week
        columns = range(start_col, end_col + 1)

        row = 0
        while any(row in occupancy[col] for col in columns):
            row += 1

        for col in columns:
            occupancy[col].add(row)
            if row > frame.column_max_rows.get(col, -1):
                frame.column_max_rows[col] = row

        frame.total_rows = max(frame.total_rows, row + 1)
        assignments.append(
            LayoutAssignment(
                event=segment.event,
                segment=segment,
                row=row,
                start_column=start_col,
                end_column=end_col,
            )
        )

    frame.assignments = sorted(assignments, key=lambda a: (a.row, a.start_column))
    return frame


def layout_month(
    events: list[CalendarEvent],
    grid_dates: list[date],
) -> list[WeekLayoutFrame]:
    """Segment and pack every week row of the grid."""
    week_count = len(grid_dates) // DAYS_PER_WEEK
    if week_count == 0:
        return []

    weeks = segments_by_week(calculate_layouts(events, grid_dates), week_count)
    return [
        pack_week(
            segments,
            week_row_index=i,
            week_dates=grid_dates[i * DAYS_PER_WEEK : (i + 1) * DAYS_PER_WEEK],
        )
        for i, segments in enumerate(weeks)
    ]


def layout_drop_preview(
    events: list[CalendarEvent],
    moved_event: CalendarEvent,
    grid_dates: list[date],
) -> list[WeekLayoutFrame]:
    """
    Month layout with one event replaced by its proposed copy.

    The copy is matched by id; if the id is not in events it is added.
    """
    others = [e for e in events if e.id != moved_event.id]
    return layout_month([*others, moved_event], grid_dates)


def calculate_overflow(
    frame: WeekLayoutFrame,
    max_visible_rows: int,
) -> dict[int, OverflowInfo]:
    """
    Per-column visible/hidden events once rows beyond max_visible_rows are cut.

    Counts hidden events per day, not hidden rows.
    """
    visible: dict[int, list[CalendarEvent]] = {col: [] for col in range(DAYS_PER_WEEK)}
    hidden: dict[int, list[CalendarEvent]] = {col: [] for col in range(DAYS_PER_WEEK)}

    for assignment in frame.assignments:
        bucket = visible if assignment.row < max_visible_rows else hidden
        for col in range(assignment.start_column, assignment.end_column + 1):
            bucket[col].append(assignment.event)

    return {
        col: OverflowInfo(visible_events=visible[col], hidden_events=hidden[col])
        for col in range(DAYS_PER_WEEK)
    }
