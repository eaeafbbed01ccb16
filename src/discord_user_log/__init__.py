"""Log Discord guild joins and leaves to a channel."""

__version__ = "1.0.0"
