"""Value types shared by the membership cache, reconciler and notifier."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MembershipChange(str, Enum):
    """Kind of presence change carried by a live event or found by a sync."""

    JOINED = "joined"
    LEFT = "left"


@dataclass(frozen=True)
class MemberRecord:
    """Display fields for one member; empty strings mean unknown."""

    username: str = ""
    discriminator: str = ""

    @property
    def is_unknown(self) -> bool:
        return not self.username and not self.discriminator


@dataclass(frozen=True)
class RosterEntry:
    """One member as reported by the guild roster."""

    identity: str
    record: MemberRecord


@dataclass
class SyncReport:
    """Counters collected during one full sync."""

    fetched: int = 0
    pages: int = 0
    added: int = 0
    updated: int = 0
    removed: int = 0


class RosterPage(list):
    """Roster entries from one fetch plus the raw member count Discord sent.

    ``raw_count`` includes members that could not be turned into entries, so
    a full page with skipped members is still recognised as full.
    """

    def __init__(self, entries=(), raw_count: int | None = None) -> None:
        super().__init__(entries)
        self.raw_count = len(self) if raw_count is None else raw_count
