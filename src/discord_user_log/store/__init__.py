"""
Public façade for the local state store
=======================================

Durable membership records plus the migration ledger, backed by sqlite::

    store = await StateStore.open(core.STATE_PATH)
    records = await store.load()

Every sqlite failure surfaces as :class:`StateStoreError`; callers treat it
as fatal.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Dict, Iterable, List

from discord_user_log.exceptions import MigrationError, StateStoreError
from discord_user_log.membership.models import MemberRecord

from . import db as _db
from .migrator import Migration, load_migrations
from .repositories import MembersRepo as _MembersRepo, MigrationsRepo as _MigrationsRepo

logger = logging.getLogger(__name__)

__all__ = ["StateStore", "Migration", "load_migrations"]


class StateStore:
    """Async wrapper over the sqlite connection and its repositories."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = asyncio.Lock()
        self._members = _MembersRepo(conn, self._lock)
        self._migrations = _MigrationsRepo(conn, self._lock)
        self._closed = False

    @classmethod
    async def open(
        cls,
        path: str,
        migrations: Iterable[Migration] | None = None,
    ) -> "StateStore":
        """Connect to ``path`` and bring its schema up to date."""
        try:
            conn = await asyncio.to_thread(_db.connect, path)
        except sqlite3.Error as exc:
            raise StateStoreError(
                f"failed to open sqlite db at {path}: {exc}", operation="open"
            ) from exc

        store = cls(conn)
        try:
            await store.apply_migrations(
                load_migrations() if migrations is None else migrations
            )
        except MigrationError:
            await store.close()
            raise
        return store

    async def apply_migrations(self, migrations: Iterable[Migration]) -> List[str]:
        try:
            return await self._migrations.apply(migrations)
        except sqlite3.Error as exc:
            raise MigrationError(
                f"failed to migrate: {exc}", operation="migrate"
            ) from exc

    async def applied_migrations(self) -> List[str]:
        try:
            return await self._migrations.applied_names()
        except sqlite3.Error as exc:
            raise MigrationError(
                f"failed to read migration ledger: {exc}", operation="migrate"
            ) from exc

    async def load(self) -> Dict[str, MemberRecord]:
        try:
            return await self._members.load_all()
        except sqlite3.Error as exc:
            raise StateStoreError(
                f"failed to query members: {exc}", operation="load"
            ) from exc

    async def insert(self, identity: str, record: MemberRecord) -> None:
        try:
            await self._members.insert(identity, record)
        except sqlite3.Error as exc:
            raise StateStoreError(
                f"failed to insert member '{identity}' to persistent storage: {exc}",
                operation="insert",
                identity=identity,
            ) from exc

    async def update(self, identity: str, record: MemberRecord) -> None:
        try:
            await self._members.update(identity, record)
        except sqlite3.Error as exc:
            raise StateStoreError(
                f"failed to update member '{identity}' in persistent storage: {exc}",
                operation="update",
                identity=identity,
            ) from exc

    async def remove(self, identity: str) -> None:
        try:
            await self._members.remove(identity)
        except sqlite3.Error as exc:
            raise StateStoreError(
                f"failed to delete member '{identity}' from persistent storage: {exc}",
                operation="remove",
                identity=identity,
            ) from exc

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        async with self._lock:
            await asyncio.to_thread(self._conn.close)
        logger.info("Closed state store")
