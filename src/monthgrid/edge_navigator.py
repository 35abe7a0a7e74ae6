"""Delayed page navigation while a drag or resize hovers a grid edge."""

import logging
from typing import Callable

from .core.geometry import NavigationEdge
from .ports.scheduler import Scheduler, TaskHandle

logger = logging.getLogger(__name__)

DEFAULT_EDGE_NAVIGATION_DELAY_MS = 500
DAY_PAGE_EDGE_NAVIGATION_DELAY_MS = 1200


class EdgeNavigator:
    """
    Arms a one-shot timer while the pointer stays in an edge zone.

    When the timer fires and the session is still live, the navigation
    callback runs and the proximity flag resets. The page under the pointer
    has changed by then, so only the host's next proximity report re-arms the
    timer; holding the pointer at the edge keeps paging once per report cycle.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        is_session_active: Callable[[], bool],
        delay_ms: int = DEFAULT_EDGE_NAVIGATION_DELAY_MS,
    ):
        self._scheduler = scheduler
        self._is_session_active = is_session_active
        self.delay_ms = delay_ms
        self._handle: TaskHandle | None = None
        self._near_edge = False
        self._edge: NavigationEdge | None = None
        self._navigate: Callable[[], None] | None = None

    @property
    def is_near_edge(self) -> bool:
        return self._near_edge

    @property
    def edge(self) -> NavigationEdge | None:
        """Edge of the pending or last reported proximity."""
        return self._edge

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def report(
        self,
        near_edge: bool,
        edge: NavigationEdge,
        navigate: Callable[[], None],
        delay_ms: int | None = None,
    ) -> None:
        """Feed one proximity sample from the host."""
        if not near_edge:
            self.cancel()
            return

        self._near_edge = True
        if self._handle is not None:
            return

        self._edge = edge
        self._navigate = navigate
        effective = self.delay_ms if delay_ms is None else delay_ms
        self._handle = self._scheduler.call_later(effective / 1000, self._fire)
        logger.debug(f"Edge navigation armed for {edge.value} edge ({effective} ms)")

    def cancel(self) -> None:
        """Cancel any pending navigation and clear the proximity flag."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Edge navigation cancelled")
        self._navigate = None
        self._near_edge = False

    def _fire(self) -> None:
        self._handle = None
        navigate, self._navigate = self._navigate, None

        if navigate is None or not self._is_session_active():
            logger.debug("Edge navigation timer fired after session ended, ignoring")
            self._near_edge = False
            return

        logger.debug(f"Navigating from {self._edge.value if self._edge else 'unknown'} edge")
        try:
            navigate()
        finally:
            self._near_edge = False
