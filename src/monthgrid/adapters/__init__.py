"""Adapters - concrete implementations of ports."""

from .apscheduler_timers import APSchedulerScheduler, APSchedulerHandle
from .static_grid import StaticGridGeometry

__all__ = [
    "APSchedulerScheduler",
    "APSchedulerHandle",
    "StaticGridGeometry",
]
