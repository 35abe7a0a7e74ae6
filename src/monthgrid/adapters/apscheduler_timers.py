"""APScheduler adapter - one-shot timers on an asyncio event loop."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class APSchedulerHandle:
    """Handle for a single scheduled job."""

    def __init__(self, scheduler: AsyncIOScheduler, callback: Callable[[], None]):
        self._scheduler = scheduler
        self._callback = callback
        self.job_id: str | None = None
        self.cancelled = False
        self.fired = False

    async def _run(self) -> None:
        # Coroutine jobs run on the loop thread; plain functions would be
        # sent to a thread pool by the asyncio executor.
        if self.cancelled:
            return
        self.fired = True
        self._callback()

    def cancel(self) -> None:
        """Cancel the job. Safe to call repeatedly or after it ran."""
        if self.cancelled:
            return
        self.cancelled = True
        if self.job_id is None or self.fired:
            return
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            logger.debug(f"Job {self.job_id} already gone when cancelled")


class APSchedulerScheduler:
    """
    APScheduler-backed scheduler.

    Implements Scheduler protocol. Each call_later adds a DateTrigger job to an
    AsyncIOScheduler; the scheduler is started lazily, so the first call must
    happen while the event loop is running.
    """

    def __init__(
        self,
        scheduler: AsyncIOScheduler | None = None,
        timezone_name: str = "UTC",
    ):
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone_name)

    @classmethod
    def from_config(cls, config) -> "APSchedulerScheduler":
        return cls(timezone_name=config.scheduler_timezone)

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Interaction scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def call_later(self, delay: float, callback: Callable[[], None]) -> APSchedulerHandle:
        """Run callback once after delay seconds."""
        self.start()
        handle = APSchedulerHandle(self.scheduler, callback)
        run_date = datetime.now(timezone.utc) + timedelta(seconds=max(delay, 0.0))
        job = self.scheduler.add_job(
            handle._run,
            DateTrigger(run_date=run_date),
            misfire_grace_time=None,
        )
        handle.job_id = job.id
        return handle
