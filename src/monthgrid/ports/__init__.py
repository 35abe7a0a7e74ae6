"""Ports - interfaces/protocols for host-provided dependencies."""

from .scheduler import Scheduler, TaskHandle
from .grid_geometry import GridGeometry

__all__ = [
    "Scheduler",
    "TaskHandle",
    "GridGeometry",
]
