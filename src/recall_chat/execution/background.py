"""
Detached background work.

Runs fire-and-forget coroutines (embedding enrichment, model pulls) outside
the request that scheduled them. The scheduling caller never awaits the work
and never sees its outcome; failures are logged and discarded.
"""

import asyncio
import logging
from typing import Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """
    Schedules detached asyncio tasks with bounded concurrency.

    At most `max_concurrency` submitted coroutines run at once; the rest wait
    their turn. Strong references are held until each task finishes so the
    event loop doesn't garbage-collect pending work.
    """

    def __init__(self, max_concurrency: Optional[int] = 8):
        """
        Args:
            max_concurrency: Maximum number of coroutines running at once
                             (None = unbounded)
        """
        self._max_concurrency = max_concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._tasks: Set[asyncio.Task] = set()
        self.failure_count = 0

        logger.info(f"BackgroundTaskRunner initialized (max_concurrency={max_concurrency})")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, coro: Coroutine, name: str = "background") -> asyncio.Task:
        """
        Schedule a coroutine without waiting for it.

        Must be called from inside a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self._run(coro, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._finished(done, coro))
        return task

    def _finished(self, task: asyncio.Task, coro: Coroutine) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            # Cancelled before it got a semaphore slot; close() is a no-op otherwise
            coro.close()

    async def _run(self, coro: Coroutine, name: str) -> None:
        if self._max_concurrency is not None and self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)

        try:
            if self._semaphore is None:
                await coro
            else:
                async with self._semaphore:
                    await coro
        except asyncio.CancelledError:
            logger.debug(f"Background task {name} cancelled")
            raise
        except Exception as e:
            self.failure_count += 1
            logger.error(f"Background task {name} failed: {e}")

    async def drain(self) -> None:
        """Wait for every task scheduled so far (used at shutdown)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel all pending tasks and wait for them to unwind."""
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
