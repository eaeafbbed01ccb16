"""
Handle gateway member join/leave events for the configured guild.
"""

from __future__ import annotations

import logging

import discord

from discord_user_log.config import core
from discord_user_log.exceptions import DulError
from discord_user_log.membership import MemberRecord, MembershipChange

logger = logging.getLogger(__name__)


def _record_for(user: discord.abc.User) -> MemberRecord:
    return MemberRecord(
        getattr(user, "name", None) or "",
        getattr(user, "discriminator", None) or "",
    )


async def handle_join(client: discord.Client, member: discord.Member) -> None:
    """Record ``member`` as joined and announce it."""

    guild = getattr(member, "guild", None)
    if guild is None or guild.id != core.GUILD_ID:
        return

    try:
        await client.reconciler.apply_live_event(
            MembershipChange.JOINED, str(member.id), _record_for(member)
        )
    except DulError as exc:
        await client.fail(exc)


async def handle_remove(
    client: discord.Client, payload: discord.RawMemberRemoveEvent
) -> None:
    """Record the removed user as left and announce it.

    Uses the raw event so leaves are seen even for members that were never in
    discord.py's member cache.
    """

    if payload.guild_id != core.GUILD_ID or payload.user is None:
        return

    try:
        await client.reconciler.apply_live_event(
            MembershipChange.LEFT, str(payload.user.id)
        )
    except DulError as exc:
        await client.fail(exc)
