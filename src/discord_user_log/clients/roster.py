"""Paginated guild roster fetches over the Discord REST API."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from discord.http import HTTPClient

from discord_user_log import retry
from discord_user_log.exceptions import RosterFetchError
from discord_user_log.membership.models import MemberRecord, RosterEntry, RosterPage

logger = logging.getLogger(__name__)


def parse_members(payload: Iterable[dict[str, Any]]) -> List[RosterEntry]:
    """Convert raw member objects into roster entries.

    Member objects without a ``user`` are dropped.
    """
    entries: List[RosterEntry] = []
    for member in payload:
        user = member.get("user")
        if not user:
            logger.debug("Skipping roster member without user object")
            continue
        entries.append(
            RosterEntry(
                str(user["id"]),
                MemberRecord(
                    user.get("username") or "",
                    user.get("discriminator") or "",
                ),
            )
        )
    return entries


class RosterClient:
    """``fetch_page`` collaborator for :meth:`Reconciler.full_sync`."""

    def __init__(
        self,
        http: HTTPClient,
        guild_id: int,
        *,
        attempts: int = 1,
        delay: float = 0.0,
    ) -> None:
        self._http = http
        self._guild_id = guild_id
        self._attempts = attempts
        self._delay = delay

    async def fetch_page(self, after: Optional[str], limit: int) -> RosterPage:
        """Return up to ``limit`` members with ids greater than ``after``."""
        try:
            payload = await retry.call_with_retry(
                self._http.get_members,
                self._guild_id,
                limit,
                after,
                attempts=self._attempts,
                delay=self._delay,
                describe=f"fetching guild members after '{after or ''}'",
            )
        except Exception as exc:
            raise RosterFetchError(
                f"failed fetching guild members after '{after or ''}': {exc}",
                after=after,
            ) from exc

        entries = RosterPage(parse_members(payload), raw_count=len(payload))
        logger.debug(
            "Fetched %d roster member(s) after %s (%d usable)",
            entries.raw_count,
            after,
            len(entries),
        )
        return entries
