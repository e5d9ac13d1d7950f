"""Fire-and-forget background refresh of stale cache entries.

A stale hit is answered from the cache straight away; the refetch runs as
its own asyncio task and only affects later requests, through the cache.

By default every stale hit schedules its own refresh, so concurrent
requests for one stale key may each call upstream. With ``single_flight``
enabled, a refresh already in flight for a key is reused instead.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from aipulse.core.logging import get_logger, log_context

logger = get_logger(__name__)

RefreshFactory = Callable[[], Awaitable[Any]]


class BackgroundRefresher:
    """Schedules and tracks background refresh tasks.

    The refresher holds a reference to every running task (the event loop
    only keeps weak ones) and can wait for or cancel them at shutdown.
    """

    def __init__(self, single_flight: bool = False) -> None:
        self.single_flight = single_flight
        self._tasks: set[asyncio.Task[None]] = set()
        self._in_flight: dict[str, asyncio.Task[None]] = {}

    @property
    def pending(self) -> int:
        """Number of refresh tasks not yet finished."""
        return len(self._tasks)

    def schedule(self, key: str, refresh: RefreshFactory) -> asyncio.Task[None]:
        """Start ``refresh()`` in the background for cache key ``key``.

        Must be called from a running event loop. Returns the task (the
        existing one when single-flight collapses the call).
        """
        if self.single_flight:
            existing = self._in_flight.get(key)
            if existing is not None and not existing.done():
                logger.debug("refresh_already_in_flight", cache_key=key)
                return existing

        task = asyncio.create_task(self._run(key, refresh), name=f"refresh:{key}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        if self.single_flight:
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))

        logger.debug("refresh_scheduled", cache_key=key)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled refresh has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel outstanding refreshes and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("refresh_tasks_cancelled", count=len(tasks))

    async def _run(self, key: str, refresh: RefreshFactory) -> None:
        with log_context(cache_key=key, background=True):
            try:
                await refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Nothing awaits this task; log here or the failure is lost.
                logger.error("background_refresh_failed", error=str(e))

    def _forget(self, key: str, task: asyncio.Task[None]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
