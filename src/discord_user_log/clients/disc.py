"""Discord client bootstrap utilities."""

from __future__ import annotations

import asyncio
import logging
import signal

import discord

from discord_user_log.config import core, sync
from discord_user_log.event_hooks import member_hook, ready_hook
from discord_user_log.exceptions import DulError
from discord_user_log.membership import Notifier, Reconciler, SyncScheduler
from discord_user_log.store import StateStore

from .roster import RosterClient

logger = logging.getLogger(__name__)

# --- Intents --------------------------------------------------------------- #
intents = discord.Intents.default()
intents.members = True  # privileged intent, must be enabled for the bot


class DULClient(discord.Client):
    """Gateway client wiring live member events and scheduled syncs to the reconciler."""

    def __init__(self) -> None:
        super().__init__(intents=intents)
        self.exit_code = 0
        self.store: StateStore | None = None
        self.reconciler: Reconciler | None = None
        self.roster: RosterClient | None = None
        self.scheduler = SyncScheduler(sync.INTERVAL)

    async def setup_hook(self) -> None:
        """Open the state store and hydrate the membership cache before connecting."""

        self.store = await StateStore.open(core.STATE_PATH)
        notifier = Notifier(
            self.send_notification,
            attempts=sync.RETRY_ATTEMPTS,
            delay=sync.RETRY_DELAY,
        )
        self.reconciler = await Reconciler.load(
            self.store, notifier, page_size=sync.PAGE_SIZE
        )
        self.roster = RosterClient(
            self.http,
            core.GUILD_ID,
            attempts=sync.RETRY_ATTEMPTS,
            delay=sync.RETRY_DELAY,
        )

    async def send_notification(self, text: str) -> None:
        channel = self.get_channel(core.CHANNEL_ID)
        if channel is None:
            channel = await self.fetch_channel(core.CHANNEL_ID)
        await channel.send(text)

    async def run_full_sync(self) -> None:
        logger.info("Syncing members from server")
        await self.reconciler.full_sync(self.roster.fetch_page)

    async def fail(self, exc: Exception) -> None:
        """Log a fatal error with its context and shut the client down."""

        context = [
            f"{name}={value}"
            for name in ("operation", "identity", "after")
            if (value := getattr(exc, name, None))
        ]
        logger.critical(
            "Fatal %s (%s): %s",
            type(exc).__name__,
            ", ".join(context) or "no context",
            exc,
            exc_info=exc,
        )
        self.exit_code = 1
        await self.close()

    async def close(self) -> None:
        # Let an in-flight live event or sync finish before tearing down.
        if self.reconciler is not None:
            await self.reconciler.close()
        await self.scheduler.stop()
        await super().close()
        if self.store is not None:
            await self.store.close()


bot = DULClient()


@bot.event
async def on_ready() -> None:
    await ready_hook.handle(bot)


@bot.event
async def on_member_join(member: discord.Member) -> None:
    await member_hook.handle_join(bot, member)


@bot.event
async def on_raw_member_remove(payload: discord.RawMemberRemoveEvent) -> None:
    await member_hook.handle_remove(bot, payload)


async def serve(client: DULClient, token: str) -> None:
    """Run ``client`` until it closes itself or SIGINT/SIGTERM arrives."""

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:  # pragma: no cover - Windows event loops
            pass

    async with client:
        runner = asyncio.create_task(client.start(token))
        waiter = asyncio.create_task(stop.wait())
        done, _ = await asyncio.wait(
            {runner, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
        if waiter in done:
            logger.info("Received shutdown signal")
            await client.close()
        waiter.cancel()
        await runner


def run() -> int:
    """Start the client using configuration from the environment.

    Returns the process exit status.
    """

    try:
        asyncio.run(serve(bot, core.DISCORD_TOKEN))
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
        return 1
    except discord.PrivilegedIntentsRequired as exc:
        logger.error("Enable the server members intent for this bot: %s", exc)
        return 1
    except DulError as exc:
        logger.critical("Startup failed: %s", exc, exc_info=exc)
        return 1

    logger.info("I'm closing 😢")
    return bot.exit_code
