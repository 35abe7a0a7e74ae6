"""Pure calendar-day arithmetic - no I/O dependencies.

Every helper here counts calendar days, never 24-hour durations, so results
stay correct across daylight-saving transitions.
"""

from datetime import date, datetime, timedelta

SUNDAY = 0
MONDAY = 1

WEEKDAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def to_day(value: date | datetime) -> date:
    """Strip the time component, returning the calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """
    Signed number of calendar days from start to end.

    Time components are ignored. A timezone-aware pair straddling a DST
    transition still yields the plain calendar-day count.
    """
    return (to_day(end) - to_day(start)).days


def add_days(value: date | datetime, days: int) -> date | datetime:
    """
    Move a date or datetime by whole calendar days.

    Datetimes keep their wall-clock time and tzinfo; the UTC offset is
    re-derived for the new day instead of adding 24h multiples.
    """
    if isinstance(value, datetime):
        return datetime.combine(value.date() + timedelta(days=days), value.timetz())
    return value + timedelta(days=days)


def with_day(value: date | datetime, day: date) -> date | datetime:
    """Replace the calendar day of value, keeping any time-of-day."""
    if isinstance(value, datetime):
        return datetime.combine(day, value.timetz())
    return day


def weekday_index(d: date) -> int:
    """Weekday with 0 = Sunday ... 6 = Saturday."""
    return (d.weekday() + 1) % 7


def parse_first_day_of_week(value: str | int) -> int:
    """Accept 0-6 or a weekday name (0 = Sunday)."""
    if isinstance(value, int):
        index = value
    elif value.strip().isdigit():
        index = int(value.strip())
    else:
        name = value.strip().lower()
        if name not in WEEKDAY_NAMES:
            raise ValueError(f"Unknown weekday: {value}")
        return WEEKDAY_NAMES.index(name)
    if not 0 <= index <= 6:
        raise ValueError(f"First day of week out of range: {value}")
    return index


def week_start(d: date, first_day_of_week: int) -> date:
    """Start of the week containing d."""
    since = (weekday_index(d) - first_day_of_week) % 7
    return d - timedelta(days=since)


def generate_month_dates(
    month: date,
    first_day_of_week: int = SUNDAY,
    show_sixth_row: bool = False,
) -> list[date]:
    """
    Dates shown in a week-aligned month grid.

    Includes leading days from the previous month and trailing days from the
    next. Returns 35 dates unless the month spills into a sixth week (or
    show_sixth_row forces it), in which case 42.
    """
    first = month.replace(day=1)
    if first.month == 12:
        last = date(first.year + 1, 1, 1) - timedelta(days=1)
    else:
        last = date(first.year, first.month + 1, 1) - timedelta(days=1)

    grid_start = week_start(first, first_day_of_week)
    fifth_week_end = grid_start + timedelta(days=34)
    total_days = 42 if show_sixth_row or last > fifth_week_end else 35

    return [grid_start + timedelta(days=i) for i in range(total_days)]


def visible_grid_range(
    month: date,
    first_day_of_week: int = SUNDAY,
    show_sixth_row: bool = False,
) -> tuple[date, date]:
    """First and last date of the visible month grid (inclusive)."""
    dates = generate_month_dates(month, first_day_of_week, show_sixth_row)
    return dates[0], dates[-1]


def week_rows(dates: list[date]) -> list[list[date]]:
    """Split grid dates into 7-day rows."""
    return [dates[i : i + 7] for i in range(0, len(dates), 7)]


def week_number(d: date, first_day_of_week: int = MONDAY) -> int:
    """
    Week-of-year number for any week-start day.

    Generalises ISO 8601: the week's anchor is its start + 3 days, and week 1
    is the first week whose anchor falls in January. With Monday as the first
    day this matches d.isocalendar().week.
    """
    start = week_start(d, first_day_of_week)
    anchor = start + timedelta(days=3)
    first_week = _first_week_start(anchor.year, first_day_of_week)
    return 1 + (start - first_week).days // 7


def _first_week_start(year: int, first_day_of_week: int) -> date:
    jan1_week = week_start(date(year, 1, 1), first_day_of_week)
    if (jan1_week + timedelta(days=3)).year == year:
        return jan1_week
    return jan1_week + timedelta(days=7)
