"""Bounded pool for outbound asynchronous calls."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from ..utils.exceptions import PoolSaturatedError
from .logging import LoggerMixin

T = TypeVar("T")


class TaskPool(LoggerMixin):
    """Limits how many calls run at once and how many may wait.

    At most ``max_workers`` submitted calls run concurrently; up to
    ``queue_capacity`` more wait for a free worker. Anything beyond that is
    rejected with ``PoolSaturatedError``.
    """

    def __init__(self, max_workers: int = 10, queue_capacity: int = 100) -> None:
        """Initialize task pool.

        Args:
            max_workers: Maximum number of calls running at once.
            queue_capacity: Maximum number of calls waiting for a worker.
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if queue_capacity < 0:
            raise ValueError("queue_capacity must not be negative")

        self._max_workers = max_workers
        self._queue_capacity = queue_capacity
        self._semaphore = asyncio.Semaphore(max_workers)
        self._active = 0
        self._waiting = 0

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def queue_capacity(self) -> int:
        return self._queue_capacity

    @property
    def active(self) -> int:
        """Number of calls currently running."""
        return self._active

    @property
    def waiting(self) -> int:
        """Number of calls waiting for a worker."""
        return self._waiting

    async def submit(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run an async callable once a worker is free.

        Args:
            func: Coroutine function to call.
            *args: Positional arguments for ``func``.
            **kwargs: Keyword arguments for ``func``.

        Returns:
            Whatever ``func`` returns.

        Raises:
            PoolSaturatedError: If all workers are busy and the queue is full.
        """
        if self._active >= self._max_workers and self._waiting >= self._queue_capacity:
            self.logger.warning(f"Rejecting call: {self._active} running, {self._waiting} waiting")
            raise PoolSaturatedError(
                f"Task pool saturated ({self._max_workers} workers, "
                f"{self._queue_capacity} queued)"
            )

        self._waiting += 1
        try:
            await self._semaphore.acquire()
        finally:
            self._waiting -= 1

        self._active += 1
        try:
            return await func(*args, **kwargs)
        finally:
            self._active -= 1
            self._semaphore.release()
