import asyncio

import pytest

from discord_user_log.exceptions import DeliveryError
from discord_user_log.membership import MemberRecord, MembershipChange, Notifier, format_message


@pytest.mark.parametrize(
    "change, record, expected",
    [
        (MembershipChange.JOINED, MemberRecord(), "<@42> joined the server"),
        (MembershipChange.LEFT, MemberRecord(), "<@42> left the server"),
        (
            MembershipChange.JOINED,
            MemberRecord("alice", "0001"),
            "<@42> (alice#0001) joined the server",
        ),
        (
            MembershipChange.LEFT,
            MemberRecord("alice", "0001"),
            "<@42> (alice#0001) left the server",
        ),
        # One known field is enough for the long form
        (MembershipChange.LEFT, MemberRecord("alice", ""), "<@42> (alice#) left the server"),
    ],
)
def test_format_message(change, record, expected):
    assert format_message(change, "42", record) == expected


def test_notify_retries_transient_failures():
    sent = []
    failures = [OSError("connection reset")]

    async def send(text):
        if failures:
            raise failures.pop()
        sent.append(text)

    notifier = Notifier(send, attempts=3, delay=0)
    asyncio.run(notifier.notify(MembershipChange.JOINED, "42", MemberRecord()))

    assert sent == ["<@42> joined the server"]


def test_notify_raises_delivery_error_after_retries():
    calls = []

    async def send(text):
        calls.append(text)
        raise OSError("network down")

    notifier = Notifier(send, attempts=2, delay=0)
    with pytest.raises(DeliveryError) as excinfo:
        asyncio.run(notifier.notify(MembershipChange.LEFT, "42", MemberRecord()))

    assert len(calls) == 2
    assert excinfo.value.identity == "42"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_notify_does_not_retry_permanent_failures():
    calls = []

    async def send(text):
        calls.append(text)
        raise RuntimeError("channel is gone")

    notifier = Notifier(send, attempts=5, delay=0)
    with pytest.raises(DeliveryError):
        asyncio.run(notifier.notify(MembershipChange.JOINED, "42", MemberRecord()))

    assert len(calls) == 1
