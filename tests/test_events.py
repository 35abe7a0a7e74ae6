"""Tests for the event model and rendering order."""

from datetime import date, datetime, time

import pytest

from monthgrid.core.events import (
    CalendarEvent,
    EventDropped,
    EventResized,
    ResizeEdge,
    event_sort_key,
    shift_event,
    sort_events,
    with_range,
)


class TestCalendarEvent:
    def test_is_multi_day(self, make_event):
        assert make_event("a", date(2024, 6, 7), date(2024, 6, 8)).is_multi_day
        assert not make_event("b", date(2024, 6, 7)).is_multi_day

    def test_duration_days(self, make_event):
        assert make_event("a", date(2024, 6, 7), date(2024, 6, 10)).duration_days == 4
        assert make_event("b", date(2024, 6, 7)).duration_days == 1

    def test_is_recurring(self, make_event):
        assert make_event("a", date(2024, 6, 7), series_id="weekly").is_recurring
        assert not make_event("b", date(2024, 6, 7)).is_recurring

    def test_from_dict(self):
        event = CalendarEvent.from_dict(
            {
                "id": 42,
                "title": "Offsite",
                "start": "2024-06-07T09:00:00",
                "end": "2024-06-10T17:00:00",
                "all_day": True,
                "series_id": "s1",
            }
        )
        assert event.id == "42"
        assert event.start == datetime(2024, 6, 7, 9, 0)
        assert event.end == datetime(2024, 6, 10, 17, 0)
        assert event.all_day
        assert event.series_id == "s1"

    def test_from_dict_defaults_end_to_start(self):
        event = CalendarEvent.from_dict({"id": "x", "start": "2024-06-07"})
        assert event.end == event.start
        assert event.title == ""

    def test_from_dict_missing_start(self):
        with pytest.raises(KeyError):
            CalendarEvent.from_dict({"id": "x"})

    def test_to_dict_round_trips_core_fields(self, make_event):
        event = make_event("a", date(2024, 6, 7), date(2024, 6, 8))
        restored = CalendarEvent.from_dict(event.to_dict())
        assert restored == event


class TestSortOrder:
    def test_categories_then_start_then_duration(self, make_event):
        timed_single = make_event("timed", date(2024, 6, 3), all_day=False)
        all_day_single = make_event("allday", date(2024, 6, 3))
        timed_multi = make_event("timedmulti", date(2024, 6, 3), date(2024, 6, 4), all_day=False)
        all_day_multi = make_event("allmulti", date(2024, 6, 5), date(2024, 6, 6))

        ordered = sort_events([timed_single, all_day_single, timed_multi, all_day_multi])

        assert [e.id for e in ordered] == ["allmulti", "timedmulti", "allday", "timed"]

    def test_longer_first_on_same_start(self, make_event):
        short = make_event("short", date(2024, 6, 3), date(2024, 6, 4))
        long = make_event("long", date(2024, 6, 3), date(2024, 6, 6))
        assert [e.id for e in sort_events([short, long])] == ["long", "short"]

    def test_id_breaks_ties(self, make_event):
        b = make_event("b", date(2024, 6, 3))
        a = make_event("a", date(2024, 6, 3))
        assert event_sort_key(a) < event_sort_key(b)


class TestShiftAndRange:
    def test_shift_event_keeps_times(self, make_event):
        event = make_event("a", date(2024, 6, 7), date(2024, 6, 8))
        moved = shift_event(event, 3)
        assert moved.start == datetime(2024, 6, 10, 9, 0)
        assert moved.end == datetime(2024, 6, 11, 17, 0)
        assert moved.id == event.id

    def test_shift_by_zero_returns_same_event(self, make_event):
        event = make_event("a", date(2024, 6, 7))
        assert shift_event(event, 0) is event

    def test_with_range_plain_dates_keep_time(self, make_event):
        event = make_event("a", date(2024, 6, 7), date(2024, 6, 8))
        resized = with_range(event, date(2024, 6, 5), date(2024, 6, 9))
        assert resized.start == datetime(2024, 6, 5, 9, 0)
        assert resized.end == datetime(2024, 6, 9, 17, 0)

    def test_with_range_datetimes_used_as_is(self, make_event):
        event = make_event("a", date(2024, 6, 7))
        start = datetime(2024, 6, 7, 8, 15)
        resized = with_range(event, start, datetime.combine(date(2024, 6, 7), time(10, 0)))
        assert resized.start == start


class TestChangeDetails:
    def test_event_dropped_updated_event(self, make_event):
        event = make_event("a", date(2024, 6, 7), series_id="s1")
        moved = shift_event(event, 2)
        dropped = EventDropped(
            event=event,
            old_start=event.start,
            old_end=event.end,
            new_start=moved.start,
            new_end=moved.end,
            day_delta=2,
        )
        assert dropped.updated_event == moved
        assert dropped.is_recurring
        assert dropped.series_id == "s1"

    def test_event_resized_updated_event(self, make_event):
        event = make_event("a", date(2024, 6, 7))
        resized = EventResized(
            event=event,
            old_start=event.start,
            old_end=event.end,
            new_start=event.start,
            new_end=datetime(2024, 6, 9, 17, 0),
            edge=ResizeEdge.END,
        )
        assert resized.updated_event.end == datetime(2024, 6, 9, 17, 0)
        assert not resized.is_recurring
