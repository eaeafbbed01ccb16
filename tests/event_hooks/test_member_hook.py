import asyncio
from types import SimpleNamespace

from discord_user_log.event_hooks import member_hook
from discord_user_log.exceptions import StateStoreError
from discord_user_log.membership import MemberRecord, MembershipChange


class FakeReconciler:
    def __init__(self, error=None):
        self.events = []
        self._error = error

    async def apply_live_event(self, change, identity, record=None):
        self.events.append((change, identity, record))
        if self._error is not None:
            raise self._error
        return True


def _client(reconciler):
    failures = []

    async def fail(exc):
        failures.append(exc)

    return SimpleNamespace(reconciler=reconciler, fail=fail, failures=failures)


def _member(guild_id, member_id=42, name="alice", discriminator="0001"):
    return SimpleNamespace(
        id=member_id,
        name=name,
        discriminator=discriminator,
        guild=SimpleNamespace(id=guild_id),
    )


def test_join_in_configured_guild_is_applied(monkeypatch):
    monkeypatch.setattr(member_hook.core, "GUILD_ID", 7)
    reconciler = FakeReconciler()
    client = _client(reconciler)

    asyncio.run(member_hook.handle_join(client, _member(7)))

    assert reconciler.events == [
        (MembershipChange.JOINED, "42", MemberRecord("alice", "0001"))
    ]
    assert client.failures == []


def test_join_in_other_guild_is_ignored(monkeypatch):
    monkeypatch.setattr(member_hook.core, "GUILD_ID", 7)
    reconciler = FakeReconciler()

    asyncio.run(member_hook.handle_join(_client(reconciler), _member(99)))

    assert reconciler.events == []


def test_remove_uses_raw_payload(monkeypatch):
    monkeypatch.setattr(member_hook.core, "GUILD_ID", 7)
    reconciler = FakeReconciler()
    payload = SimpleNamespace(guild_id=7, user=SimpleNamespace(id=42))

    asyncio.run(member_hook.handle_remove(_client(reconciler), payload))

    assert reconciler.events == [(MembershipChange.LEFT, "42", None)]


def test_remove_without_user_is_ignored(monkeypatch):
    monkeypatch.setattr(member_hook.core, "GUILD_ID", 7)
    reconciler = FakeReconciler()
    payload = SimpleNamespace(guild_id=7, user=None)

    asyncio.run(member_hook.handle_remove(_client(reconciler), payload))

    assert reconciler.events == []


def test_store_error_escalates_to_client_fail(monkeypatch):
    monkeypatch.setattr(member_hook.core, "GUILD_ID", 7)
    error = StateStoreError("disk full", operation="insert", identity="42")
    client = _client(FakeReconciler(error=error))

    asyncio.run(member_hook.handle_join(client, _member(7)))

    assert client.failures == [error]
