"""
SQLite bootstrap and connection helpers
=======================================

- WAL + pragmatic PRAGMAs; the state file is small but must survive crashes.
- ``:memory:`` is accepted for tests.
"""

from __future__ import annotations

import logging
import pathlib
import sqlite3

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def connect(path: str) -> sqlite3.Connection:
    # Autocommit; writes use explicit `with conn:` blocks in worker threads.
    if path != MEMORY_PATH:
        pathlib.Path(path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=False,
    )

    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=FULL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    conn.execute("PRAGMA busy_timeout=3000;")    # 3s

    conn.row_factory = sqlite3.Row

    logger.debug("Opened state store at %s", path)
    return conn
