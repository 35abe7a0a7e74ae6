"""Split events into per-week-row segments of a month grid."""

from dataclasses import dataclass
from datetime import date

from .dates import days_between, to_day
from .events import CalendarEvent, sort_events


@dataclass(frozen=True)
class EventSegment:
    """The part of an event visible within one week row."""

    event: CalendarEvent
    week_row_index: int
    start_day_in_week: int
    end_day_in_week: int
    is_first_segment: bool
    is_last_segment: bool

    @property
    def span_days(self) -> int:
        return self.end_day_in_week - self.start_day_in_week + 1


@dataclass(frozen=True)
class EventLayout:
    """An event and its segments, ordered by week row."""

    event: CalendarEvent
    segments: tuple[EventSegment, ...]


def segment_event(
    event: CalendarEvent,
    grid_start: date,
    grid_end: date,
) -> list[EventSegment]:
    """
    Segments of one event within the grid [grid_start, grid_end].

    Returns [] when the event does not intersect the grid. is_first_segment
    is only set when the event's true start is visible, so an event running
    in from before the grid gets no start cap (same for the end).
    """
    event_start = to_day(event.start)
    event_end = max(to_day(event.end), event_start)

    if event_end < grid_start or event_start > grid_end:
        return []

    visible_start = max(event_start, grid_start)
    visible_end = min(event_end, grid_end)

    start_index = days_between(grid_start, visible_start)
    end_index = days_between(grid_start, visible_end)

    segments = []
    current = start_index
    while current <= end_index:
        week_row = current // 7
        row_end = (week_row + 1) * 7 - 1
        segment_end = min(end_index, row_end)

        segments.append(
            EventSegment(
                event=event,
                week_row_index=week_row,
                start_day_in_week=current % 7,
                end_day_in_week=segment_end % 7,
                is_first_segment=current == start_index and visible_start == event_start,
                is_last_segment=segment_end == end_index and visible_end == event_end,
            )
        )
        current = row_end + 1

    return segments


def calculate_layouts(
    events: list[CalendarEvent],
    grid_dates: list[date],
    multi_day_only: bool = False,
) -> list[EventLayout]:
    """
    Segment every event intersecting the grid.

    Events are processed in rendering order (see event_sort_key) so the
    result can be fed straight into row packing. With multi_day_only, events
    that start and end on the same day are skipped.
    """
    if not grid_dates:
        return []

    grid_start, grid_end = grid_dates[0], grid_dates[-1]
    candidates = [e for e in events if e.is_multi_day] if multi_day_only else events

    layouts = []
    for event in sort_events(candidates):
        segments = segment_event(event, grid_start, grid_end)
        if segments:
            layouts.append(EventLayout(event=event, segments=tuple(segments)))
    return layouts


def segments_by_week(
    layouts: list[EventLayout],
    week_count: int,
) -> list[list[EventSegment]]:
    """Regroup segments per week row, keeping the layouts' order."""
    weeks: list[list[EventSegment]] = [[] for _ in range(week_count)]
    for layout in layouts:
        for segment in layout.segments:
            if 0 <= segment.week_row_index < week_count:
                weeks[segment.week_row_index].append(segment)
    return weeks
