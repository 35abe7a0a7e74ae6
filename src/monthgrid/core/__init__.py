"""Functional core - pure layout and interaction logic with no I/O."""

from .dates import add_days, days_between, generate_month_dates, to_day, week_number
from .events import CalendarEvent, EventDropped, EventResized, ResizeEdge, event_sort_key, shift_event
from .geometry import NavigationEdge, Point, Rect, detect_edge
from .segments import EventLayout, EventSegment, calculate_layouts, segment_event
from .packing import (
    LayoutAssignment,
    OverflowInfo,
    WeekLayoutFrame,
    calculate_overflow,
    layout_drop_preview,
    layout_month,
    pack_week,
)
from .highlight import HighlightCellInfo, build_highlighted_cells, drop_start_cell_index

__all__ = [
    # Dates
    "add_days",
    "days_between",
    "generate_month_dates",
    "to_day",
    "week_number",
    # Events
    "CalendarEvent",
    "EventDropped",
    "EventResized",
    "ResizeEdge",
    "event_sort_key",
    "shift_event",
    # Geometry
    "NavigationEdge",
    "Point",
    "Rect",
    "detect_edge",
    # Segmentation
    "EventLayout",
    "EventSegment",
    "calculate_layouts",
    "segment_event",
    # Packing
    "LayoutAssignment",
    "OverflowInfo",
    "WeekLayoutFrame",
    "calculate_overflow",
    "layout_drop_preview",
    "layout_month",
    "pack_week",
    # Highlighting
    "HighlightCellInfo",
    "build_highlighted_cells",
    "drop_start_cell_index",
]
