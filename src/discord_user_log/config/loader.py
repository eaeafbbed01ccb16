from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit ``path`` wins, then ``DUL_CONFIG``, then ``config.toml``."""
    if path is not None:
        return Path(path)
    override = os.getenv("DUL_CONFIG", "").strip()
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the TOML config file.

    A missing file yields an empty dict so every setting falls back to its
    environment variable.
    """
    target = resolve_config_path(path)
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


__all__ = ["load_raw_config", "resolve_config_path", "DEFAULT_CONFIG_PATH"]
