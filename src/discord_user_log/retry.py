"""Retry with exponential backoff for calls to Discord."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

import aiohttp
import discord

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Rate limits are handled inside discord.py; these are the failures worth a
# second attempt. Client errors (403, 404, ...) are not retried.
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    discord.DiscordServerError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


async def call_with_retry(
    fn: Callable[..., Awaitable[T]],
    *args,
    attempts: int = 1,
    delay: float = 0.0,
    describe: str = "call",
) -> T:
    """
    Await ``fn(*args)``, retrying transient failures.

    The wait doubles after every failed attempt, starting at ``delay``
    seconds. The last failure is re-raised once ``attempts`` are used up.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    attempt = 1
    while True:
        try:
            return await fn(*args)
        except TRANSIENT_ERRORS as exc:
            if attempt >= attempts:
                raise
            wait = delay * (2 ** (attempt - 1))
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                describe,
                attempt,
                attempts,
                exc,
                wait,
            )
            await asyncio.sleep(wait)
            attempt += 1
