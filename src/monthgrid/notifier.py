"""Observer channel for state-change notifications."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """
    Explicit subscribe/unsubscribe listener list.

    Mutating code batches its field changes and calls notify_listeners() once
    per committed change.
    """

    def __init__(self):
        self._listeners: list[Listener] = []

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Subscribe. Returns a function that unsubscribes."""
        self._listeners.append(listener)
        return lambda: self.remove_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unsubscribe one registration of listener. Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def notify_listeners(self) -> None:
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception(f"Listener {listener!r} failed")

    def clear_listeners(self) -> None:
        self._listeners.clear()
