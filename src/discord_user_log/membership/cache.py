"""
In-memory mirror of the persisted membership.

:class:`MembershipCache` is not safe on its own: every mutation must happen
while the caller holds :attr:`MembershipCache.lock`. The reconciler is the only
caller that mutates it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Mapping, Set

from .models import MemberRecord


@dataclass
class MembershipCache:
    """Identity -> record mapping plus the cold-start flag."""

    cold: bool = False
    _members: Dict[str, MemberRecord] = field(default_factory=dict, repr=False)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @classmethod
    def from_records(cls, records: Mapping[str, MemberRecord]) -> "MembershipCache":
        """Build the startup cache; an empty store means first run or lost state."""

        return cls(cold=not records, _members=dict(records))

    def get(self, identity: str) -> MemberRecord | None:
        return self._members.get(identity)

    def contains(self, identity: str) -> bool:
        return identity in self._members

    def put(self, identity: str, record: MemberRecord) -> None:
        self._members[identity] = record

    def delete(self, identity: str) -> MemberRecord | None:
        """Drop ``identity`` and return the record it held, if any."""

        return self._members.pop(identity, None)

    def snapshot_identities(self) -> Set[str]:
        """Return a copy of the cached identity set."""

        return set(self._members)

    def __len__(self) -> int:
        return len(self._members)
