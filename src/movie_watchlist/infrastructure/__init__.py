"""Infrastructure module for cross-cutting concerns."""

from .container import Container
from .logging import setup_logging
from .task_pool import TaskPool

__all__ = [
    "Container",
    "TaskPool",
    "setup_logging",
]
