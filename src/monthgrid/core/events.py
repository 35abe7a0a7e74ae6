"""Pure event domain logic - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum

from .dates import add_days, days_between, to_day


class ResizeEdge(Enum):
    """Which edge of an event a resize moves."""

    START = "start"
    END = "end"


@dataclass(frozen=True)
class CalendarEvent:
    """
    A calendar event.

    Immutable: moving or resizing produces a new value. The last occupied
    day is the calendar day of end.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    color: str | None = None
    comment: str | None = None
    external_id: str | None = None
    occurrence_id: str | None = None
    series_id: str | None = None

    @property
    def is_multi_day(self) -> bool:
        """Start and end fall on different calendar days."""
        return to_day(self.start) < to_day(self.end)

    @property
    def is_recurring(self) -> bool:
        return self.series_id is not None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_days(self) -> int:
        """Number of grid cells the event covers (at least 1)."""
        return max(1, days_between(self.start, self.end) + 1)

    @classmethod
    def from_dict(cls, data: dict) -> "CalendarEvent":
        """Create an event from a JSON-style mapping with ISO date strings."""
        start = datetime.fromisoformat(data["start"])
        end = datetime.fromisoformat(data["end"]) if data.get("end") else start
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            start=start,
            end=end,
            all_day=bool(data.get("all_day", False)),
            color=data.get("color"),
            comment=data.get("comment"),
            external_id=data.get("external_id"),
            occurrence_id=data.get("occurrence_id"),
            series_id=data.get("series_id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "all_day": self.all_day,
            "color": self.color,
            "series_id": self.series_id,
        }


def _category(event: CalendarEvent) -> int:
    if event.is_multi_day and event.all_day:
        return 0
    if event.is_multi_day:
        return 1
    if event.all_day:
        return 2
    return 3


def event_sort_key(event: CalendarEvent) -> tuple:
    """
    Rendering order for month layout.

    1. All-day multi-day, 2. timed multi-day, 3. all-day single-day,
    4. timed single-day; then earliest start, longest duration, and id.
    """
    return (_category(event), event.start, -event.duration, event.id)


def sort_events(events: list[CalendarEvent]) -> list[CalendarEvent]:
    return sorted(events, key=event_sort_key)


def shift_event(event: CalendarEvent, days: int) -> CalendarEvent:
    """Move an event by whole calendar days, keeping wall-clock times."""
    if days == 0:
        return event
    return replace(event, start=add_days(event.start, days), end=add_days(event.end, days))


def with_range(
    event: CalendarEvent,
    start: date | datetime,
    end: date | datetime,
) -> CalendarEvent:
    """
    Copy of event spanning start..end.

    Plain dates keep the event's original time-of-day on the new days.
    """
    if not isinstance(start, datetime):
        start = datetime.combine(start, event.start.timetz())
    if not isinstance(end, datetime):
        end = datetime.combine(end, event.end.timetz())
    return replace(event, start=start, end=end)


@dataclass(frozen=True)
class EventDropped:
    """Result of a completed drag-and-drop move."""

    event: CalendarEvent
    old_start: datetime
    old_end: datetime
    new_start: datetime
    new_end: datetime
    day_delta: int

    @property
    def is_recurring(self) -> bool:
        return self.event.is_recurring

    @property
    def series_id(self) -> str | None:
        return self.event.series_id

    @property
    def updated_event(self) -> CalendarEvent:
        return replace(self.event, start=self.new_start, end=self.new_end)


@dataclass(frozen=True)
class EventResized:
    """Result of a completed resize."""

    event: CalendarEvent
    old_start: datetime
    old_end: datetime
    new_start: datetime
    new_end: datetime
    edge: ResizeEdge

    @property
    def is_recurring(self) -> bool:
        return self.event.is_recurring

    @property
    def series_id(self) -> str | None:
        return self.event.series_id

    @property
    def updated_event(self) -> CalendarEvent:
        return replace(self.event, start=self.new_start, end=self.new_end)
