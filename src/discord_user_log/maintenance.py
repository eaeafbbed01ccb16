"""
Common utilities for periodic background jobs.

This module exposes helpers for scheduling a recurring job and cancelling it
when the application shuts down. A failing cycle stops the loop and is handed
to ``on_error``; deciding whether that is fatal belongs to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


async def startup(
    task_fn: Callable[[], Awaitable[None]],
    interval: float,
    *,
    on_error: Callable[[Exception], Awaitable[None]],
    initial_delay: float | None = None,
) -> asyncio.Task:
    """
    Schedule ``task_fn`` to run every ``interval`` seconds.

    The first cycle waits ``initial_delay`` seconds (``interval`` when
    omitted). Exceptions end the loop after ``on_error`` has been awaited.

    Returns the created :class:`asyncio.Task` handle.
    """

    first_wait = interval if initial_delay is None else initial_delay

    async def _periodic() -> None:
        if first_wait > 0:
            await asyncio.sleep(first_wait)
        while True:
            try:
                await task_fn()
            except Exception as exc:
                logger.error("Periodic cycle failed: %s", exc)
                await on_error(exc)
                return
            await asyncio.sleep(interval)

    return asyncio.create_task(_periodic())


async def shutdown(task: asyncio.Task | None) -> None:
    """
    Cancel a task started with :func:`startup`.

    Tolerates ``None`` and being called from inside the task itself.
    """

    if not task or task.done():
        return
    if task is asyncio.current_task():
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:  # pragma: no cover - normal cancellation
        pass
