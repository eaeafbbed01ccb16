"""Schema migrations shipped as ``*.sql`` files next to this module."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import List

MIGRATIONS_DIR = pathlib.Path(__file__).with_name("migrations")


@dataclass(frozen=True)
class Migration:
    """A named SQL script; names sort into application order."""

    name: str
    sql: str


def load_migrations(directory: pathlib.Path | str | None = None) -> List[Migration]:
    """Read every ``*.sql`` file in ``directory`` sorted by file name."""

    root = pathlib.Path(directory) if directory is not None else MIGRATIONS_DIR
    return [
        Migration(path.name, path.read_text(encoding="utf-8"))
        for path in sorted(root.glob("*.sql"))
        if path.is_file()
    ]
