"""
Drag-and-drop and resize interaction state machine.

A DragSession tracks at most one pointer-driven move or resize of an event
on the month grid. Hosts feed it gesture lifecycle calls and raw pointer
samples; it publishes the proposed date range, the highlighted cells and
their validity through a change-notification channel, and pages the grid
when the pointer lingers at an edge.

Example:

    session = DragSession(scheduler)
    session.add_listener(redraw)
    session.start_drag(event, date(2024, 6, 15))
    session.handle_drag_move(pointer, week_row_index=2, geometry=grid)
    ...
    dropped = session.commit_drop()
    if dropped:
        store(dropped.updated_event)
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable

from .config import Config
from .core.dates import add_days, days_between, to_day, with_day
from .core.events import CalendarEvent, EventDropped, EventResized, ResizeEdge, shift_event, with_range
from .core.geometry import NavigationEdge, Point, Rect, detect_edge
from .core.highlight import (
    HighlightCellInfo,
    build_highlighted_cells,
    cell_index_at,
    drop_start_cell_index,
    proposed_drop_range,
)
from .edge_navigator import EdgeNavigator
from .notifier import ChangeNotifier
from .ports.grid_geometry import GridGeometry
from .ports.scheduler import Scheduler, TaskHandle

logger = logging.getLogger(__name__)

DropValidator = Callable[[date | datetime, date | datetime], bool]
ResizeValidator = Callable[[date | datetime, date | datetime, ResizeEdge], bool]


class PreconditionError(RuntimeError):
    """A session operation was called out of sequence (strict mode only)."""


@dataclass(frozen=True)
class Idle:
    """No interaction in progress."""


@dataclass(frozen=True)
class Dragging:
    event: CalendarEvent
    source_date: date
    target_date: date
    is_valid_target: bool = True
    position: Point | None = None


@dataclass(frozen=True)
class Resizing:
    event: CalendarEvent
    edge: ResizeEdge
    original_start: datetime
    original_end: datetime


DragSessionState = Idle | Dragging | Resizing

IDLE = Idle()


@dataclass(frozen=True)
class ProposedRange:
    """
    Tentative range of whichever gesture is active.

    Written only while exactly one of Dragging/Resizing is active, and reset
    on every return to Idle. Drag and resize share it so their highlight
    logic cannot drift apart.
    """

    start: date | datetime | None = None
    end: date | datetime | None = None
    is_valid: bool = False
    cells: tuple[HighlightCellInfo, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self == ProposedRange()


@dataclass(frozen=True)
class _PendingMove:
    """Latest pointer sample and the geometry needed to interpret it."""

    position: Point
    week_row_index: int
    geometry: GridGeometry
    grab_offset_x: float = 0.0
    duration_days: int = 1
    validate: Callable | None = None
    resize: bool = False


class DragSession(ChangeNotifier):
    """
    Single-session drag/resize controller.

    Drag and resize are mutually exclusive. Starting a drag force-cancels an
    active resize; starting a resize while dragging is rejected (logged and
    ignored, or PreconditionError with strict_preconditions).
    """

    def __init__(self, scheduler: Scheduler, config: Config | None = None):
        super().__init__()
        config = config or Config()
        self._scheduler = scheduler
        self.move_debounce_ms = config.move_debounce_ms
        self.edge_proximity_threshold = config.edge_proximity_threshold
        self.strict = config.strict_preconditions

        self._state: DragSessionState = IDLE
        self._proposed = ProposedRange()

        self._pending_move: _PendingMove | None = None
        self._debounce_handle: TaskHandle | None = None
        self._last_cell: tuple[int, int] | None = None

        self._edge_navigator = EdgeNavigator(
            scheduler,
            is_session_active=lambda: self.is_active,
            delay_ms=config.edge_navigation_delay_ms,
        )

    # ============== State accessors ==============

    @property
    def state(self) -> DragSessionState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    @property
    def is_resizing(self) -> bool:
        return isinstance(self._state, Resizing)

    @property
    def is_active(self) -> bool:
        return not isinstance(self._state, Idle)

    @property
    def dragged_event(self) -> CalendarEvent | None:
        return self._state.event if isinstance(self._state, Dragging) else None

    @property
    def source_date(self) -> date | None:
        return self._state.source_date if isinstance(self._state, Dragging) else None

    @property
    def target_date(self) -> date | None:
        return self._state.target_date if isinstance(self._state, Dragging) else None

    @property
    def is_valid_target(self) -> bool:
        return isinstance(self._state, Dragging) and self._state.is_valid_target

    @property
    def drag_position(self) -> Point | None:
        return self._state.position if isinstance(self._state, Dragging) else None

    @property
    def resizing_event(self) -> CalendarEvent | None:
        return self._state.event if isinstance(self._state, Resizing) else None

    @property
    def resize_edge(self) -> ResizeEdge | None:
        return self._state.edge if isinstance(self._state, Resizing) else None

    @property
    def resize_original_start(self) -> datetime | None:
        return self._state.original_start if isinstance(self._state, Resizing) else None

    @property
    def resize_original_end(self) -> datetime | None:
        return self._state.original_end if isinstance(self._state, Resizing) else None

    @property
    def proposed_start(self) -> date | datetime | None:
        return self._proposed.start

    @property
    def proposed_end(self) -> date | datetime | None:
        return self._proposed.end

    @property
    def is_proposed_drop_valid(self) -> bool:
        return self._proposed.is_valid

    @property
    def highlighted_cells(self) -> tuple[HighlightCellInfo, ...]:
        """Cells under the proposal. A new tuple per recomputation."""
        return self._proposed.cells

    @property
    def is_near_edge(self) -> bool:
        return self._edge_navigator.is_near_edge

    @property
    def is_edge_navigation_pending(self) -> bool:
        return self._edge_navigator.is_pending

    @property
    def proposed_event(self) -> CalendarEvent | None:
        """Copy of the active event moved to the proposed range, for live previews."""
        start, end = self._proposed.start, self._proposed.end
        if start is None or end is None:
            return None
        match self._state:
            case Dragging(event=event) | Resizing(event=event):
                return with_range(event, start, end)
            case _:
                return None

    # ============== Drag lifecycle ==============

    def start_drag(self, event: CalendarEvent, source_date: date | datetime) -> None:
        """Begin moving event, grabbed on source_date."""
        if isinstance(self._state, Resizing):
            logger.debug(f"Drag of {event.id} started during resize, cancelling resize")
            self.cancel_resize()

        self._edge_navigator.cancel()
        self._cancel_debounce()
        self._pending_move = None
        self._last_cell = None

        source = to_day(source_date)
        self._state = Dragging(event=event, source_date=source, target_date=source)
        logger.debug(f"Drag started: {event.id} from {source}")
        self.notify_listeners()

    def update_drag(
        self,
        target_date: date | datetime,
        is_valid: bool,
        position: Point | None,
    ) -> None:
        """Record the target under the pointer. No-op unless dragging or unchanged."""
        state = self._state
        if not isinstance(state, Dragging):
            return

        target = to_day(target_date)
        if (state.target_date, state.is_valid_target, state.position) == (target, is_valid, position):
            return

        self._state = replace(state, target_date=target, is_valid_target=is_valid, position=position)
        self.notify_listeners()

    def update_proposed_drop_range(
        self,
        proposed_start: date | datetime,
        proposed_end: date | datetime,
        is_valid: bool,
        preserve_time: bool = False,
    ) -> None:
        """
        Set the proposed drop range.

        Dates are truncated to whole days unless preserve_time is set. Works
        even before start_drag: a drop-target probe can arrive ahead of the
        drag start, and a call here means a drag is underway.
        """
        if not preserve_time:
            proposed_start, proposed_end = to_day(proposed_start), to_day(proposed_end)

        if self._set_proposed(proposed_start, proposed_end, is_valid, self._proposed.cells):
            self.notify_listeners()

    def clear_proposed_drop_range(self) -> None:
        """Drop the proposal, e.g. when the pointer leaves the grid."""
        self._last_cell = None
        if self._proposed.is_empty:
            return
        self._proposed = ProposedRange()
        self.notify_listeners()

    def complete_drag(self) -> date | None:
        """
        Finish the drag and return the target date.

        Returns None (after resetting) when no drag is active or the target is
        invalid.
        """
        state = self._state
        if not isinstance(state, Dragging) or not state.is_valid_target:
            self._reset()
            return None

        target = state.target_date
        logger.debug(f"Drag completed: {state.event.id} onto {target}")
        self._reset()
        return target

    def commit_drop(self) -> EventDropped | None:
        """complete_drag() plus the moved event and its old/new bounds."""
        state = self._state
        target = self.complete_drag()
        if target is None or not isinstance(state, Dragging):
            return None

        delta = days_between(state.source_date, target)
        moved = shift_event(state.event, delta)
        return EventDropped(
            event=state.event,
            old_start=state.event.start,
            old_end=state.event.end,
            new_start=moved.start,
            new_end=moved.end,
            day_delta=delta,
        )

    def cancel_drag(self) -> None:
        """Abandon any interaction and return to Idle."""
        self._reset()

    def calculate_day_delta(self) -> int:
        """Signed calendar days from source to target, 0 when not dragging."""
        if not isinstance(self._state, Dragging):
            return 0
        return days_between(self._state.source_date, self._state.target_date)

    # ============== Resize lifecycle ==============

    def start_resize(self, event: CalendarEvent, edge: ResizeEdge) -> None:
        """
        Begin resizing event from edge.

        Does not notify. The first notification must come from the first
        update_resize, after the host's gesture recognizer has attached.
        """
        if isinstance(self._state, Dragging):
            self._precondition_failed(
                f"start_resize({event.id}) while dragging {self._state.event.id}"
            )
            return

        if isinstance(self._state, Resizing):
            logger.debug(f"Resize of {event.id} started during resize, cancelling previous resize")
            self.cancel_resize()

        self._edge_navigator.cancel()
        self._cancel_debounce()
        self._pending_move = None
        self._last_cell = None

        self._proposed = ProposedRange()
        self._state = Resizing(
            event=event,
            edge=edge,
            original_start=event.start,
            original_end=event.end,
        )
        logger.debug(f"Resize started: {event.id} ({edge.value} edge)")

    def update_resize(
        self,
        proposed_start: date | datetime,
        proposed_end: date | datetime,
        is_valid: bool,
        cells: tuple[HighlightCellInfo, ...] | list[HighlightCellInfo] = (),
    ) -> None:
        """Overwrite the proposed range and cells of the active resize."""
        if not isinstance(self._state, Resizing):
            self._precondition_failed("update_resize without an active resize")
            return

        self._proposed = ProposedRange(proposed_start, proposed_end, is_valid, tuple(cells))
        self.notify_listeners()

    def complete_resize(self) -> tuple[date | datetime, date | datetime] | None:
        """
        Finish the resize and return (start, end).

        Returns None (after cancelling) when no resize is active or the
        proposal is invalid or was never made.
        """
        proposed = self._proposed
        if not isinstance(self._state, Resizing) or not proposed.is_valid or proposed.start is None:
            self.cancel_resize()
            return None

        logger.debug(f"Resize completed: {self._state.event.id} -> {proposed.start}..{proposed.end}")
        self._reset()
        return proposed.start, proposed.end

    def commit_resize(self) -> EventResized | None:
        """complete_resize() plus the resized event and its old/new bounds."""
        state = self._state
        result = self.complete_resize()
        if result is None or not isinstance(state, Resizing):
            return None

        updated = with_range(state.event, *result)
        return EventResized(
            event=state.event,
            old_start=state.original_start,
            old_end=state.original_end,
            new_start=updated.start,
            new_end=updated.end,
            edge=state.edge,
        )

    def cancel_resize(self) -> None:
        """Abandon any interaction and return to Idle."""
        self._reset()

    # ============== Pointer moves ==============

    def handle_drag_move(
        self,
        global_position: Point,
        *,
        week_row_index: int,
        geometry: GridGeometry,
        grab_offset_x: float = 0.0,
        event_duration_days: int | None = None,
        validate: DropValidator | None = None,
    ) -> None:
        """
        Store a pointer sample for the active drag.

        The expensive work runs at most once per debounce window on the latest
        sample, and only when the (start cell, week row) pair changed.
        """
        state = self._state
        if event_duration_days is None and isinstance(state, Dragging):
            event_duration_days = state.event.duration_days

        self._pending_move = _PendingMove(
            position=global_position,
            week_row_index=week_row_index,
            geometry=geometry,
            grab_offset_x=grab_offset_x,
            duration_days=event_duration_days or 1,
            validate=validate,
        )
        if not isinstance(state, Dragging):
            return
        self._schedule_move_processing()

    def handle_resize_move(
        self,
        global_position: Point,
        *,
        week_row_index: int,
        geometry: GridGeometry,
        validate: ResizeValidator | None = None,
    ) -> None:
        """Store a pointer sample for the active resize (same debounce as drags)."""
        self._pending_move = _PendingMove(
            position=global_position,
            week_row_index=week_row_index,
            geometry=geometry,
            validate=validate,
            resize=True,
        )
        if not isinstance(self._state, Resizing):
            return
        self._schedule_move_processing()

    def flush_pending_move(self) -> None:
        """Process the latest stored sample now instead of waiting for the window."""
        self._cancel_debounce()
        self._process_pending_move()

    def _schedule_move_processing(self) -> None:
        if self._debounce_handle is not None:
            return
        if self.move_debounce_ms <= 0:
            self._process_pending_move()
            return
        self._debounce_handle = self._scheduler.call_later(
            self.move_debounce_ms / 1000, self._on_debounce_elapsed
        )

    def _on_debounce_elapsed(self) -> None:
        self._debounce_handle = None
        self._process_pending_move()

    def _process_pending_move(self) -> None:
        move = self._pending_move
        if move is None:
            return
        match self._state:
            case Dragging() as state if not move.resize:
                self._process_drag_move(state, move)
            case Resizing() as state if move.resize:
                self._process_resize_move(state, move)

    def _process_drag_move(self, state: Dragging, move: _PendingMove) -> None:
        geometry = move.geometry
        row_bounds = geometry.week_row_bounds(move.week_row_index)
        local_x = move.position.x - row_bounds.left

        start_cell = drop_start_cell_index(local_x, move.grab_offset_x, geometry.day_width)
        if start_cell is None:
            return
        if (start_cell, move.week_row_index) == self._last_cell:
            return
        self._last_cell = (start_cell, move.week_row_index)

        row_dates = geometry.week_dates(move.week_row_index)
        if not row_dates:
            return

        start, end = proposed_drop_range(row_dates[0], start_cell, move.duration_days)
        is_valid = move.validate(start, end) if move.validate else True
        cells = build_highlighted_cells(
            start_cell,
            move.duration_days,
            move.week_row_index,
            geometry.total_rows,
            geometry.day_width,
            geometry.week_row_bounds,
            geometry.week_dates,
        )

        # The grabbed day keeps its offset from the event start
        grab_offset_days = days_between(state.event.start, state.source_date)
        target = add_days(start, grab_offset_days)

        changed = self._set_proposed(start, end, is_valid, cells)
        new_state = replace(state, target_date=target, is_valid_target=is_valid, position=move.position)
        if new_state != state:
            self._state = new_state
            changed = True
        if changed:
            self.notify_listeners()

    def _process_resize_move(self, state: Resizing, move: _PendingMove) -> None:
        geometry = move.geometry
        row_bounds = geometry.week_row_bounds(move.week_row_index)
        column = cell_index_at(move.position.x - row_bounds.left, geometry.day_width)
        if column is None:
            return
        if (column, move.week_row_index) == self._last_cell:
            return
        self._last_cell = (column, move.week_row_index)

        row_dates = geometry.week_dates(move.week_row_index)
        if column >= len(row_dates):
            return
        day = row_dates[column]

        start_day, end_day = to_day(state.original_start), to_day(state.original_end)
        if state.edge is ResizeEdge.START:
            start_day = min(day, end_day)
        else:
            end_day = max(day, start_day)

        proposed_start = with_day(state.original_start, start_day)
        proposed_end = with_day(state.original_end, end_day)
        if proposed_start > proposed_end:
            if state.edge is ResizeEdge.START:
                proposed_start = proposed_end
            else:
                proposed_end = proposed_start

        is_valid = move.validate(proposed_start, proposed_end, state.edge) if move.validate else True
        cells = build_highlighted_cells(
            days_between(row_dates[0], start_day),
            days_between(start_day, end_day) + 1,
            move.week_row_index,
            geometry.total_rows,
            geometry.day_width,
            geometry.week_row_bounds,
            geometry.week_dates,
        )
        self.update_resize(proposed_start, proposed_end, is_valid, cells)

    # ============== Edge navigation ==============

    def handle_edge_proximity(
        self,
        near_edge: bool,
        is_leading_edge: bool,
        navigate: Callable[[], None],
        delay_ms: int | None = None,
    ) -> None:
        """Arm or cancel edge paging. Ignored (and cancelled) with no active session."""
        if not self.is_active:
            self._edge_navigator.cancel()
            return

        edge = NavigationEdge.LEADING if is_leading_edge else NavigationEdge.TRAILING

        def navigate_and_refresh() -> None:
            try:
                navigate()
            finally:
                self._on_page_changed()

        self._edge_navigator.report(near_edge, edge, navigate_and_refresh, delay_ms)

    def _on_page_changed(self) -> None:
        # Cell indexes from the old page no longer map to the same dates
        self._last_cell = None
        if self._pending_move is not None and self.is_active:
            self._schedule_move_processing()

    def handle_pointer_edge(
        self,
        x: float,
        calendar_bounds: Rect,
        navigate_previous: Callable[[], None],
        navigate_next: Callable[[], None],
        can_navigate_previous: bool = True,
        can_navigate_next: bool = True,
        delay_ms: int | None = None,
    ) -> NavigationEdge | None:
        """
        Derive edge proximity from a pointer x-coordinate.

        A direction blocked by the host (min/max date reached) cancels rather
        than arms. Returns the edge that is armed, if any.
        """
        if not self.is_active:
            self._edge_navigator.cancel()
            return None

        edge = detect_edge(x, calendar_bounds, self.edge_proximity_threshold)
        if edge is NavigationEdge.LEADING and can_navigate_previous:
            self.handle_edge_proximity(True, True, navigate_previous, delay_ms)
            return edge
        if edge is NavigationEdge.TRAILING and can_navigate_next:
            self.handle_edge_proximity(True, False, navigate_next, delay_ms)
            return edge

        self._edge_navigator.cancel()
        return None

    def cancel_edge_navigation(self) -> None:
        """Cancel pending paging, e.g. as soon as a drop is accepted."""
        self._edge_navigator.cancel()

    # ============== Teardown ==============

    def dispose(self) -> None:
        """Cancel scheduled work and drop all listeners."""
        self.clear_listeners()
        self._reset()

    # ============== Internals ==============

    def _set_proposed(
        self,
        start: date | datetime | None,
        end: date | datetime | None,
        is_valid: bool,
        cells: tuple[HighlightCellInfo, ...],
    ) -> bool:
        proposed = ProposedRange(start, end, is_valid, cells)
        if proposed == self._proposed:
            return False
        self._proposed = proposed
        return True

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _precondition_failed(self, message: str) -> None:
        logger.warning(f"Ignoring {message}")
        if self.strict:
            raise PreconditionError(message)

    def _reset(self) -> None:
        self._edge_navigator.cancel()
        self._cancel_debounce()

        had_something = self.is_active or not self._proposed.is_empty
        if self.is_active:
            logger.debug(f"Session reset from {type(self._state).__name__}")

        self._state = IDLE
        self._proposed = ProposedRange()
        self._pending_move = None
        self._last_cell = None

        if had_something:
            self.notify_listeners()
