"""Configuration management for monthgrid."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.dates import SUNDAY, parse_first_day_of_week
from .edge_navigator import DEFAULT_EDGE_NAVIGATION_DELAY_MS

logger = logging.getLogger(__name__)

MONTHGRID_HOME = Path(os.environ.get("MONTHGRID_HOME", Path.home() / ".monthgrid"))
CONFIG_FILE = MONTHGRID_HOME / "config" / "monthgrid.conf"

DEFAULT_MOVE_DEBOUNCE_MS = 16


@dataclass
class Config:
    """monthgrid configuration."""

    first_day_of_week: int = SUNDAY
    show_sixth_row: bool = False
    # Pointer-move coalescing window (one frame)
    move_debounce_ms: int = DEFAULT_MOVE_DEBOUNCE_MS
    edge_navigation_delay_ms: int = DEFAULT_EDGE_NAVIGATION_DELAY_MS
    edge_proximity_threshold: float = 50.0
    max_visible_rows: int = 3
    strict_preconditions: bool = False
    scheduler_timezone: str = "UTC"
    log_level: str = "WARNING"


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value}")


def _parse_non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"negative value: {value}")
    return number


def _parse_log_level(value: str) -> str:
    level = value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level: {value}")
    return level


def _strip_value(value: str) -> str:
    """Remove surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config() -> Config:
    """Load configuration from monthgrid.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        try:
            match key:
                case "first_day_of_week":
                    config.first_day_of_week = parse_first_day_of_week(value)
                case "show_sixth_row":
                    config.show_sixth_row = _parse_bool(value)
                case "move_debounce_ms":
                    config.move_debounce_ms = _parse_non_negative_int(value)
                case "edge_navigation_delay_ms":
                    config.edge_navigation_delay_ms = _parse_non_negative_int(value)
                case "edge_proximity_threshold":
                    config.edge_proximity_threshold = float(value)
                case "max_visible_rows":
                    config.max_visible_rows = _parse_non_negative_int(value)
                case "strict_preconditions":
                    config.strict_preconditions = _parse_bool(value)
                case "scheduler_timezone":
                    config.scheduler_timezone = value
                case "log_level":
                    config.log_level = _parse_log_level(value)
        except ValueError as e:
            logger.warning(f"Invalid value for {key.upper()}: {e}")

    return config
