"""monthgrid CLI - inspect month layouts and drop previews."""

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click

from .config import Config, load_config
from .core.dates import days_between, generate_month_dates, parse_first_day_of_week, week_number
from .core.events import CalendarEvent, shift_event
from .core.packing import WeekLayoutFrame, calculate_overflow, layout_drop_preview, layout_month

logger = logging.getLogger(__name__)


def _load_events(path: Path) -> list[CalendarEvent]:
    """Read a JSON list of events (or {"events": [...]})."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read events from {path}: {e}")

    if isinstance(data, dict):
        data = data.get("events", [])
    try:
        events = [CalendarEvent.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid event in {path}: {e}")

    # Naive and offset-aware datetimes cannot be ordered against each other
    awareness = {value.utcoffset() is not None for e in events for value in (e.start, e.end)}
    if len(awareness) > 1:
        raise click.ClickException(f"Events in {path} mix times with and without a UTC offset")
    return events


def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise click.ClickException(f"Invalid month '{value}', expected YYYY-MM")


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.ClickException(f"Invalid date '{value}', expected YYYY-MM-DD")


def _frame_to_dict(frame: WeekLayoutFrame, max_rows: int, first_day_of_week: int) -> dict:
    overflow = calculate_overflow(frame, max_rows)
    return {
        "week_row": frame.week_row_index,
        "week_number": week_number(frame.week_dates[0], first_day_of_week) if frame.week_dates else None,
        "dates": [d.isoformat() for d in frame.week_dates],
        "total_rows": frame.total_rows,
        "assignments": [
            {
                "id": a.event.id,
                "title": a.event.title,
                "row": a.row,
                "start_column": a.start_column,
                "end_column": a.end_column,
                "is_first_segment": a.segment.is_first_segment,
                "is_last_segment": a.segment.is_last_segment,
            }
            for a in frame.assignments
        ],
        "hidden": {str(col): info.hidden_count for col, info in overflow.items() if info.hidden_count},
    }


def _show_frames(frames: list[WeekLayoutFrame], config: Config, as_json: bool) -> None:
    """Shared layout display logic."""
    if as_json:
        click.echo(
            json.dumps(
                [_frame_to_dict(f, config.max_visible_rows, config.first_day_of_week) for f in frames],
                indent=2,
            )
        )
        return

    for frame in frames:
        if not frame.week_dates:
            continue
        first, last = frame.week_dates[0], frame.week_dates[-1]
        number = week_number(first, config.first_day_of_week)
        click.echo(f"### Week {number}: {first.strftime('%b %d')} - {last.strftime('%b %d')}")

        if not frame.assignments:
            click.echo("  (no events)")
        for a in frame.assignments:
            if a.row >= config.max_visible_rows:
                continue
            cells = "".join(
                "#" if a.start_column <= col <= a.end_column else "." for col in range(7)
            )
            left = "[" if a.segment.is_first_segment else "<"
            right = "]" if a.segment.is_last_segment else ">"
            click.echo(f"  row {a.row}  {left}{cells}{right}  {a.event.title}")

        hidden = {
            col: info.hidden_count
            for col, info in calculate_overflow(frame, config.max_visible_rows).items()
            if info.hidden_count
        }
        if hidden:
            more = ", ".join(f"{frame.week_dates[col].strftime('%a')} +{n}" for col, n in hidden.items())
            click.echo(f"  more: {more}")
        click.echo()


def _build_config(first_day: str | None, six_rows: bool, max_rows: int | None) -> Config:
    config = load_config()
    if first_day is not None:
        try:
            config.first_day_of_week = parse_first_day_of_week(first_day)
        except ValueError as e:
            raise click.ClickException(str(e))
    if six_rows:
        config.show_sixth_row = True
    if max_rows is not None:
        config.max_visible_rows = max_rows
    return config


@click.group()
@click.version_option()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """monthgrid - Month grid layout tools."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else load_config().log_level,
    )


@main.command()
@click.argument("events_file", type=click.Path(path_type=Path))
@click.option("--month", required=True, help="Month to lay out (YYYY-MM)")
@click.option("--first-day", default=None, help="First day of week (0-6 or name, 0 = Sunday)")
@click.option("--six-rows", is_flag=True, help="Always show six week rows")
@click.option("--max-rows", type=click.IntRange(min=0), default=None, help="Visible rows per day")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def layout(
    events_file: Path,
    month: str,
    first_day: str | None,
    six_rows: bool,
    max_rows: int | None,
    as_json: bool,
):
    """Show the packed layout of a month."""
    try:
        config = _build_config(first_day, six_rows, max_rows)
        grid = generate_month_dates(_parse_month(month), config.first_day_of_week, config.show_sixth_row)
        events = _load_events(events_file)
    except click.ClickException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    logger.debug(f"Laying out {len(events)} events over {grid[0]}..{grid[-1]}")
    _show_frames(layout_month(events, grid), config, as_json)


@main.command()
@click.argument("events_file", type=click.Path(path_type=Path))
@click.option("--month", required=True, help="Month to lay out (YYYY-MM)")
@click.option("--event", "event_id", required=True, help="Id of the event to move")
@click.option("--to", "target", required=True, help="New start day (YYYY-MM-DD)")
@click.option("--first-day", default=None, help="First day of week (0-6 or name, 0 = Sunday)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def preview(
    events_file: Path,
    month: str,
    event_id: str,
    target: str,
    first_day: str | None,
    as_json: bool,
):
    """Show the month layout after moving an event to a new start day."""
    try:
        config = _build_config(first_day, False, None)
        grid = generate_month_dates(_parse_month(month), config.first_day_of_week, config.show_sixth_row)
        events = _load_events(events_file)
        target_day = _parse_day(target)
        event = next((e for e in events if e.id == event_id), None)
        if event is None:
            raise click.ClickException(f"No event with id '{event_id}'")
    except click.ClickException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    moved = shift_event(event, days_between(event.start, target_day))
    logger.debug(f"Previewing {event.id}: {event.start} -> {moved.start}")
    if not as_json:
        click.echo(f"Moving '{event.title}' to {moved.start.date().isoformat()}\n")
    _show_frames(layout_drop_preview(events, moved, grid), config, as_json)
