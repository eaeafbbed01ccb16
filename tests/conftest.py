import os, sys
from pathlib import Path

_TESTS_DIR = Path(__file__).resolve().parent

# Add src/ (package) and tests/ (shared fakes in helpers.py) to sys.path
sys.path.insert(0, str(_TESTS_DIR.parent / "src"))
sys.path.insert(0, str(_TESTS_DIR))

# Ensure required environment variables for discord_user_log.config
os.environ.setdefault("DUL_TOKEN", "test-token")
os.environ.setdefault("DUL_GUILD_ID", "7")
os.environ.setdefault("DUL_CHANNEL_ID", "8")
os.environ.setdefault("DUL_STATE_PATH", ":memory:")
