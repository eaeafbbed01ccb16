"""
Repositories (SQL-only)
=======================
- Pure CRUD over the ``members`` and ``migrations`` tables.
- sqlite errors propagate untouched; :class:`StateStore` wraps them.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Dict, Iterable, List

from discord_user_log.membership.models import MemberRecord

from .migrator import Migration

logger = logging.getLogger(__name__)


class MembersRepo:
    """Async CRUD helpers for the ``members`` table."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    async def load_all(self) -> Dict[str, MemberRecord]:
        """Return every persisted member keyed by Discord id."""
        sql = "SELECT discord_id, discord_username, discord_discriminator FROM members"

        def _query() -> Dict[str, MemberRecord]:
            rows = self.conn.execute(sql).fetchall()
            return {
                row["discord_id"]: MemberRecord(
                    row["discord_username"], row["discord_discriminator"]
                )
                for row in rows
            }

        async with self._lock:
            return await asyncio.to_thread(_query)  # blocking sqlite call

    async def insert(self, discord_id: str, record: MemberRecord) -> None:
        sql = """
            INSERT INTO members (discord_id, discord_username, discord_discriminator)
            VALUES (?, ?, ?)
        """

        def _run():
            with self.conn:
                self.conn.execute(sql, (discord_id, record.username, record.discriminator))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def update(self, discord_id: str, record: MemberRecord) -> None:
        sql = """
            UPDATE members SET discord_username=?, discord_discriminator=?
            WHERE discord_id=?
        """

        def _run():
            with self.conn:
                self.conn.execute(sql, (record.username, record.discriminator, discord_id))

        async with self._lock:
            await asyncio.to_thread(_run)

    async def remove(self, discord_id: str) -> None:
        sql = "DELETE FROM members WHERE discord_id=?"

        def _run():
            with self.conn:
                self.conn.execute(sql, (discord_id,))

        async with self._lock:
            await asyncio.to_thread(_run)


class MigrationsRepo:
    """Ledger of applied schema migrations."""

    def __init__(self, conn: sqlite3.Connection, lock: asyncio.Lock):
        self.conn = conn
        self._lock = lock

    def _ensure_ledger(self) -> None:
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS migrations "
            "(id INTEGER NOT NULL PRIMARY KEY, name TEXT UNIQUE)"
        )

    def _is_applied(self, name: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM migrations WHERE name=?", (name,)
        ).fetchone()
        return row is not None

    def _apply_one(self, migration: Migration) -> None:
        # executescript commits any pending transaction first, so BEGIN rides
        # inside the script and the ledger insert joins the same transaction.
        try:
            self.conn.executescript(f"BEGIN;\n{migration.sql}")
            self.conn.execute(
                "INSERT INTO migrations(name) VALUES (?)", (migration.name,)
            )
            self.conn.commit()
        except sqlite3.Error:
            if self.conn.in_transaction:
                self.conn.rollback()
            raise

    async def applied_names(self) -> List[str]:
        def _query() -> List[str]:
            self._ensure_ledger()
            rows = self.conn.execute("SELECT name FROM migrations ORDER BY name").fetchall()
            return [row["name"] for row in rows]

        async with self._lock:
            return await asyncio.to_thread(_query)

    async def apply(self, migrations: Iterable[Migration]) -> List[str]:
        """
        Apply each migration not yet recorded, in name order.

        :returns: Names of the migrations run by this call.
        """
        ordered = sorted(migrations, key=lambda m: m.name)

        def _run() -> List[str]:
            self._ensure_ledger()
            ran: List[str] = []
            for migration in ordered:
                if self._is_applied(migration.name):
                    continue
                logger.info("[migration] RUN %s", migration.name)
                self._apply_one(migration)
                logger.info("[migration] FIN %s", migration.name)
                ran.append(migration.name)
            return ran

        async with self._lock:
            return await asyncio.to_thread(_run)
