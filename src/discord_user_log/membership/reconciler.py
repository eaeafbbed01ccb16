"""
Membership reconciliation
=========================

:class:`Reconciler` owns the cache, the state store and the notifier. Both
triggers go through it:

- :meth:`Reconciler.apply_live_event` for a single gateway join/leave.
- :meth:`Reconciler.full_sync` for a paginated walk of the whole roster.

Each call holds the cache lock from start to finish, so a full sync (network
fetches included) is one critical section. Within it the order is always
store write, then cache update, then notification. Notifications are skipped
while the cache is cold; only a completed full sync warms it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Sequence

from discord_user_log.exceptions import RosterFetchError

from .cache import MembershipCache
from .models import MemberRecord, MembershipChange, RosterEntry, RosterPage, SyncReport
from .notifier import Notifier

if TYPE_CHECKING:  # pragma: no cover - type-checking only
    from discord_user_log.store import StateStore

logger = logging.getLogger(__name__)

FetchPage = Callable[[Optional[str], int], Awaitable[Sequence[RosterEntry]]]

DEFAULT_PAGE_SIZE = 1000


class Reconciler:
    """Apply live events and full roster syncs to the membership state."""

    def __init__(
        self,
        store: "StateStore",
        cache: MembershipCache,
        notifier: Notifier,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.store = store
        self.cache = cache
        self.notifier = notifier
        self.page_size = page_size
        self._closed = False

    @classmethod
    async def load(
        cls,
        store: "StateStore",
        notifier: Notifier,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> "Reconciler":
        """Hydrate the cache from ``store``."""
        cache = MembershipCache.from_records(await store.load())
        if cache.cold:
            logger.info(
                "loaded no members from state store, assuming first time load, "
                "squelching notifications"
            )
        else:
            logger.info("loaded %d members from state store", len(cache))
        return cls(store, cache, notifier, page_size=page_size)

    @property
    def cold(self) -> bool:
        return self.cache.cold

    # ------------------------------------------------------------------ #
    # Triggers
    # ------------------------------------------------------------------ #

    async def apply_live_event(
        self,
        change: MembershipChange,
        identity: str,
        record: MemberRecord | None = None,
    ) -> bool:
        """
        Apply one gateway event.

        Duplicate joins and leaves for unknown members are no-ops.

        :returns: ``True`` when the membership changed.
        """
        async with self.cache.lock:
            if self._closed:
                logger.debug("Ignoring %s event for %s after shutdown", change.value, identity)
                return False
            if change is MembershipChange.JOINED:
                return await self._add_locked(identity, record or MemberRecord())
            return await self._remove_locked(identity)

    async def full_sync(self, fetch_page: FetchPage) -> SyncReport:
        """
        Diff the live roster against the cache and converge on it.

        ``fetch_page(after, limit)`` is called until the transport reports
        fewer than ``limit`` members for a page. Members missing from the
        roster are treated as missed leaves. Display-field changes are
        applied silently. The cold flag is cleared once the walk completes.
        """
        report = SyncReport()
        async with self.cache.lock:
            if self._closed:
                logger.debug("Skipping full sync after shutdown")
                return report

            # Members still in this set at the end were not in the roster.
            unseen = self.cache.snapshot_identities()

            after: str | None = None
            while True:
                page = await fetch_page(after, self.page_size)
                if not isinstance(page, RosterPage):
                    page = RosterPage(page)
                report.pages += 1
                report.fetched += len(page)

                for entry in page:
                    cached = self.cache.get(entry.identity)
                    if cached is None:
                        if await self._add_locked(entry.identity, entry.record):
                            report.added += 1
                    elif cached != entry.record:
                        await self._update_locked(entry.identity, entry.record)
                        report.updated += 1
                    unseen.discard(entry.identity)

                # A short page is the last page; raw_count includes skipped members.
                if page.raw_count < self.page_size:
                    break
                if not page:
                    raise RosterFetchError(
                        f"roster page after '{after or ''}' had no usable members",
                        after=after,
                    )
                after = page[-1].identity

            for identity in sorted(unseen):
                if await self._remove_locked(identity):
                    report.removed += 1

            if self.cache.cold:
                logger.info("member state is known now, notifications are allowed")
            self.cache.cold = False

        logger.info(
            "Full sync finished: %d fetched over %d page(s), %d added, %d updated, %d removed",
            report.fetched,
            report.pages,
            report.added,
            report.updated,
            report.removed,
        )
        return report

    async def close(self) -> None:
        """Wait for the current lock holder, then refuse further work."""
        async with self.cache.lock:
            self._closed = True

    # ------------------------------------------------------------------ #
    # Lock-held operations
    # ------------------------------------------------------------------ #

    async def _add_locked(self, identity: str, record: MemberRecord) -> bool:
        if self.cache.contains(identity):
            return False
        await self.store.insert(identity, record)
        self.cache.put(identity, record)
        if not self.cache.cold:
            await self.notifier.notify(MembershipChange.JOINED, identity, record)
        return True

    async def _update_locked(self, identity: str, record: MemberRecord) -> None:
        await self.store.update(identity, record)
        self.cache.put(identity, record)
        logger.debug("Refreshed display fields for %s", identity)

    async def _remove_locked(self, identity: str) -> bool:
        record = self.cache.get(identity)
        if record is None:
            return False
        await self.store.remove(identity)
        self.cache.delete(identity)
        if not self.cache.cold:
            await self.notifier.notify(MembershipChange.LEFT, identity, record)
        return True
