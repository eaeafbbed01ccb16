"""Membership cache, reconciliation and notification."""

from .cache import MembershipCache
from .models import MemberRecord, MembershipChange, RosterEntry, RosterPage, SyncReport
from .notifier import Notifier, format_message
from .reconciler import Reconciler
from .scheduler import SyncScheduler

__all__ = [
    "MembershipCache",
    "MemberRecord",
    "MembershipChange",
    "RosterEntry",
    "RosterPage",
    "SyncReport",
    "Notifier",
    "format_message",
    "Reconciler",
    "SyncScheduler",
]
