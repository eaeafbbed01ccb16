import sys

from discord_user_log.clients import disc

if __name__ == "__main__":
    sys.exit(disc.run())
