"""Tests for calendar-day arithmetic and month grid generation."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from monthgrid.core.dates import (
    MONDAY,
    SUNDAY,
    add_days,
    days_between,
    generate_month_dates,
    parse_first_day_of_week,
    to_day,
    visible_grid_range,
    week_number,
    week_rows,
    weekday_index,
    with_day,
)

NEW_YORK = ZoneInfo("America/New_York")


class TestDayArithmetic:
    def test_to_day_strips_time(self):
        assert to_day(datetime(2024, 6, 7, 23, 59)) == date(2024, 6, 7)
        assert to_day(date(2024, 6, 7)) == date(2024, 6, 7)

    def test_days_between_ignores_time_of_day(self):
        assert days_between(datetime(2024, 6, 7, 23, 0), datetime(2024, 6, 8, 1, 0)) == 1
        assert days_between(date(2024, 6, 10), date(2024, 6, 7)) == -3

    def test_days_between_across_spring_forward(self):
        # 2024-03-10 is only 23 hours long in New York
        start = datetime(2024, 3, 9, 12, 0, tzinfo=NEW_YORK)
        end = datetime(2024, 3, 11, 12, 0, tzinfo=NEW_YORK)
        assert end - start < timedelta(days=2)
        assert days_between(start, end) == 2

    def test_days_between_across_fall_back(self):
        start = datetime(2024, 11, 2, 0, 30, tzinfo=NEW_YORK)
        end = datetime(2024, 11, 3, 23, 30, tzinfo=NEW_YORK)
        assert days_between(start, end) == 1

    def test_add_days_keeps_wall_clock_across_dst(self):
        before = datetime(2024, 3, 9, 23, 30, tzinfo=NEW_YORK)
        after = add_days(before, 1)
        assert after == datetime(2024, 3, 10, 23, 30, tzinfo=NEW_YORK)
        assert after.hour == 23
        assert after.utcoffset() != before.utcoffset()

    def test_add_days_on_plain_dates(self):
        assert add_days(date(2024, 2, 28), 2) == date(2024, 3, 1)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_with_day_keeps_time(self):
        assert with_day(datetime(2024, 6, 7, 14, 30), date(2024, 6, 9)) == datetime(2024, 6, 9, 14, 30)
        assert with_day(date(2024, 6, 7), date(2024, 6, 9)) == date(2024, 6, 9)

    def test_weekday_index_is_sunday_based(self):
        assert weekday_index(date(2024, 6, 2)) == 0  # Sunday
        assert weekday_index(date(2024, 6, 8)) == 6  # Saturday


class TestParseFirstDayOfWeek:
    def test_names_and_numbers(self):
        assert parse_first_day_of_week("monday") == MONDAY
        assert parse_first_day_of_week(" Sunday ") == SUNDAY
        assert parse_first_day_of_week("6") == 6
        assert parse_first_day_of_week(3) == 3

    @pytest.mark.parametrize("value", ["7", "funday", -1])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_first_day_of_week(value)


class TestGenerateMonthDates:
    def test_five_week_month(self):
        # February 2026 starts on a Sunday and fits five rows
        dates = generate_month_dates(date(2026, 2, 1))
        assert len(dates) == 35
        assert dates[0] == date(2026, 2, 1)
        assert dates[-1] == date(2026, 3, 7)

    def test_six_week_month(self):
        # June 2024 starts on Saturday and ends on Sunday
        dates = generate_month_dates(date(2024, 6, 15))
        assert len(dates) == 42
        assert dates[0] == date(2024, 5, 26)
        assert dates[-1] == date(2024, 7, 6)

    def test_forced_sixth_row(self):
        dates = generate_month_dates(date(2026, 2, 1), show_sixth_row=True)
        assert len(dates) == 42
        assert dates[-1] == date(2026, 3, 14)

    def test_monday_first(self):
        dates = generate_month_dates(date(2026, 2, 1), first_day_of_week=MONDAY)
        assert dates[0] == date(2026, 1, 26)
        assert all(d.weekday() == 0 for d in dates[::7])

    def test_dates_are_consecutive(self):
        dates = generate_month_dates(date(2024, 12, 1))
        assert all(days_between(a, b) == 1 for a, b in zip(dates, dates[1:]))

    def test_visible_grid_range(self):
        assert visible_grid_range(date(2024, 6, 1)) == (date(2024, 5, 26), date(2024, 7, 6))

    def test_week_rows(self):
        rows = week_rows(generate_month_dates(date(2026, 2, 1)))
        assert len(rows) == 5
        assert all(len(row) == 7 for row in rows)
        assert rows[1][0] == date(2026, 2, 8)


class TestWeekNumber:
    def test_monday_first_matches_iso(self):
        day = date(2024, 12, 20)
        for _ in range(30):
            assert week_number(day, MONDAY) == day.isocalendar()[1]
            day += timedelta(days=1)

    def test_sunday_first_year_boundary(self):
        # Week of Sun Dec 29 2024 has its anchor (Wed Jan 1) in 2025
        assert week_number(date(2024, 12, 29), SUNDAY) == 1
        assert week_number(date(2025, 1, 4), SUNDAY) == 1
        assert week_number(date(2025, 1, 5), SUNDAY) == 2
