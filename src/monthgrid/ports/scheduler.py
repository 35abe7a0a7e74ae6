"""Delayed-callback scheduler interface."""

from typing import Callable, Protocol


class TaskHandle(Protocol):
    """A scheduled callback that can still be cancelled."""

    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent, safe after it fired."""
        ...


class Scheduler(Protocol):
    """Interface for the host event loop's one-shot timers."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        """Run callback once after delay seconds on the host loop."""
        ...
