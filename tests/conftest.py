"""Shared fixtures: deterministic scheduler, events and grid geometry."""

from datetime import date, datetime, time

import pytest

from monthgrid.adapters.static_grid import StaticGridGeometry
from monthgrid.core.events import CalendarEvent


class FakeHandle:
    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual-clock scheduler. Nothing fires until advance() is called."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.now = max(self.now, handle.due)
            handle.fired = True
            handle.callback()
        self.now = target


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def make_event():
    """Factory for creating events from plain days."""
    def _make(
        event_id: str,
        start_day: date,
        end_day: date | None = None,
        all_day: bool = True,
        start_time: time = time(9, 0),
        end_time: time = time(17, 0),
        series_id: str | None = None,
    ) -> CalendarEvent:
        return CalendarEvent(
            id=event_id,
            title=event_id.title(),
            start=datetime.combine(start_day, start_time),
            end=datetime.combine(end_day or start_day, end_time),
            all_day=all_day,
            series_id=series_id,
        )
    return _make


@pytest.fixture
def grid_dates():
    """Five Sunday-first week rows: May 26 - June 29, 2024."""
    start = date(2024, 5, 26)
    return [date.fromordinal(start.toordinal() + i) for i in range(35)]


@pytest.fixture
def grid(grid_dates):
    # 100px per day, 80px per week row, grid at the origin
    return StaticGridGeometry(dates=grid_dates, day_width=100.0, row_height=80.0)
