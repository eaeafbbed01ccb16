"""Exception hierarchy for discord-user-log.

Local state failures are fatal. Transport failures are retried by the
adapters that raise them and only reach the trigger loops once retries are
exhausted.
"""

from __future__ import annotations


class DulError(Exception):
    """Base exception for all discord-user-log errors."""


class StateStoreError(DulError):
    """A read or write against the local state store failed."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        identity: str | None = None,
    ) -> None:
        self.operation = operation
        self.identity = identity
        super().__init__(message)


class MigrationError(StateStoreError):
    """A schema migration or its ledger entry could not be applied."""


class TransportError(DulError):
    """A call to Discord failed after exhausting retries."""


class RosterFetchError(TransportError):
    """Fetching a page of the guild roster failed."""

    def __init__(self, message: str, *, after: str | None = None) -> None:
        self.after = after
        super().__init__(message)


class DeliveryError(TransportError):
    """Sending a join/leave notification failed."""

    def __init__(self, message: str, *, identity: str = "") -> None:
        self.identity = identity
        super().__init__(message)


__all__ = [
    "DulError",
    "StateStoreError",
    "MigrationError",
    "TransportError",
    "RosterFetchError",
    "DeliveryError",
]
