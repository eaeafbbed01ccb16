import os

_DEFAULT_STATE_PATH = "./dul.db"


def _as_int(raw) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 0


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("discord_user_log", {})
        discord_cfg = cfg.get("discord", {})

        token_env = str(discord_cfg.get("token_env", "DUL_TOKEN"))

        self.DISCORD_TOKEN: str | None = os.getenv(token_env)
        self.GUILD_ID: int = _as_int(discord_cfg.get("guild_id") or os.getenv("DUL_GUILD_ID", ""))
        self.CHANNEL_ID: int = _as_int(discord_cfg.get("channel_id") or os.getenv("DUL_CHANNEL_ID", ""))
        self.STATE_PATH: str = str(cfg.get("state_path") or os.getenv("DUL_STATE_PATH") or _DEFAULT_STATE_PATH)
        self.STATUS_TEXT: str = str(discord_cfg.get("status_text", os.getenv("DUL_STATUS_TEXT", "hello")))

        required = [
            (token_env, self.DISCORD_TOKEN),
            ("DUL_GUILD_ID", self.GUILD_ID),
            ("DUL_CHANNEL_ID", self.CHANNEL_ID),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")
