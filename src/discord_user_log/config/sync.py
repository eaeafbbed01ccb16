import os

# Discord caps list-guild-members pages at 1000.
_MAX_PAGE_SIZE = 1000


class Sync:
    def __init__(self, config: dict | None = None) -> None:
        sync_cfg = (config or {}).get("discord_user_log", {}).get("sync", {})
        self.INTERVAL: float = float(sync_cfg.get("interval", os.getenv("DUL_SYNC_INTERVAL", "43200")))
        self.PAGE_SIZE: int = int(sync_cfg.get("page_size", os.getenv("DUL_SYNC_PAGE_SIZE", str(_MAX_PAGE_SIZE))))
        self.RETRY_ATTEMPTS: int = int(sync_cfg.get("retry_attempts", os.getenv("DUL_RETRY_ATTEMPTS", "3")))
        self.RETRY_DELAY: float = float(sync_cfg.get("retry_delay", os.getenv("DUL_RETRY_DELAY", "2.0")))

        if self.INTERVAL <= 0:
            raise ValueError("DUL_SYNC_INTERVAL must be positive")
        if not 1 <= self.PAGE_SIZE <= _MAX_PAGE_SIZE:
            raise ValueError(f"DUL_SYNC_PAGE_SIZE must be between 1 and {_MAX_PAGE_SIZE}")
        if self.RETRY_ATTEMPTS < 1:
            raise ValueError("DUL_RETRY_ATTEMPTS must be at least 1")
        if self.RETRY_DELAY < 0:
            raise ValueError("DUL_RETRY_DELAY must not be negative")
