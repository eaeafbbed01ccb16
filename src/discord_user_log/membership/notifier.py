"""Join/leave message formatting and delivery."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from discord_user_log import retry
from discord_user_log.exceptions import DeliveryError

from .models import MemberRecord, MembershipChange

logger = logging.getLogger(__name__)

SendFn = Callable[[str], Awaitable[object]]


def mention(identity: str) -> str:
    return f"<@{identity}>"


def format_message(change: MembershipChange, identity: str, record: MemberRecord) -> str:
    """
    Render the channel message for ``change``.

    Members with no known display fields get the bare mention form.
    """
    if record.is_unknown:
        return f"{mention(identity)} {change.value} the server"
    return (
        f"{mention(identity)} ({record.username}#{record.discriminator}) "
        f"{change.value} the server"
    )


class Notifier:
    """Send one message per applied join or leave."""

    def __init__(self, send: SendFn, *, attempts: int = 1, delay: float = 0.0) -> None:
        self._send = send
        self._attempts = attempts
        self._delay = delay

    async def notify(
        self, change: MembershipChange, identity: str, record: MemberRecord
    ) -> None:
        text = format_message(change, identity, record)
        verb = "joining" if change is MembershipChange.JOINED else "leaving"
        try:
            await retry.call_with_retry(
                self._send,
                text,
                attempts=self._attempts,
                delay=self._delay,
                describe=f"message about '{identity}' {verb}",
            )
        except Exception as exc:
            raise DeliveryError(
                f"failed to send message about '{identity}' {verb} server: {exc}",
                identity=identity,
            ) from exc
        logger.info("messaged about '%s' %s", identity, verb)
