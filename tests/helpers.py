"""Fakes shared by the reconciler and hook tests."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from discord_user_log.membership import MemberRecord, Notifier, Reconciler, RosterEntry
from discord_user_log.store import StateStore


class FakeChannel:
    """Collects every message the notifier sends."""

    def __init__(self) -> None:
        self.sent: List[str] = []

    async def send(self, text: str) -> None:
        self.sent.append(text)


class FakeRoster:
    """Serves a fixed roster sorted by identity, honouring ``after``/``limit``."""

    def __init__(self, members: Dict[str, MemberRecord]) -> None:
        self.members = dict(members)
        self.calls: List[tuple[Optional[str], int]] = []

    async def fetch_page(self, after: Optional[str], limit: int) -> Sequence[RosterEntry]:
        self.calls.append((after, limit))
        ids = sorted(self.members)
        if after is not None:
            ids = [i for i in ids if i > after]
        return [RosterEntry(i, self.members[i]) for i in ids[:limit]]


async def make_reconciler(
    seed: Dict[str, MemberRecord] | None = None,
    *,
    channel: FakeChannel | None = None,
    page_size: int = 1000,
) -> tuple[Reconciler, StateStore, FakeChannel]:
    store = await StateStore.open(":memory:")
    for identity, record in (seed or {}).items():
        await store.insert(identity, record)
    channel = channel or FakeChannel()
    reconciler = await Reconciler.load(store, Notifier(channel.send), page_size=page_size)
    return reconciler, store, channel
