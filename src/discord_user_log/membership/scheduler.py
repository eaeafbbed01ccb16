"""Periodic full-sync scheduling."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from discord_user_log.maintenance import shutdown as _shutdown, startup as _startup

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Own the background task that runs a full sync every ``interval`` seconds."""

    def __init__(self, interval: float) -> None:
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(
        self,
        sync_fn: Callable[[], Awaitable[None]],
        on_error: Callable[[Exception], Awaitable[None]],
    ) -> asyncio.Task:
        """Run ``sync_fn`` now and then on every interval.

        Calling this again while the task is alive (e.g. on a gateway
        reconnect) returns the existing handle.
        """
        if self._task is not None and not self._task.done():
            return self._task

        logger.info("Starting full sync schedule (interval=%ds)", self.interval)
        self._task = await _startup(sync_fn, self.interval, on_error=on_error, initial_delay=0)
        return self._task

    async def stop(self) -> None:
        """Cancel the scheduled task if running."""
        if self._task is not None:
            await _shutdown(self._task)
            self._task = None
