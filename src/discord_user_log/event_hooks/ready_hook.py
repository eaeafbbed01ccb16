import discord

from discord_user_log.config import core

import logging

logger = logging.getLogger(__name__)

async def handle(client: discord.Client):
    """Set presence and start the full sync schedule on client ready."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")

    try:
        await client.change_presence(activity=discord.Game(name=core.STATUS_TEXT))
    except discord.DiscordException as e:
        logger.warning("Failed to update presence: %s", e)

    # First cycle runs immediately: this is the startup sync.
    await client.scheduler.start(client.run_full_sync, client.fail)
