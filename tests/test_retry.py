import asyncio

import pytest

from discord_user_log import retry


def test_backoff_doubles_between_attempts(monkeypatch):
    waits = []
    calls = []

    async def fake_sleep(seconds):
        waits.append(seconds)

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise asyncio.TimeoutError()
        return "ok"

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    result = asyncio.run(retry.call_with_retry(flaky, attempts=3, delay=1.5))

    assert result == "ok"
    assert waits == [1.5, 3.0]


def test_non_transient_errors_are_raised_immediately():
    calls = []

    async def broken():
        calls.append(1)
        raise KeyError("bad payload")

    with pytest.raises(KeyError):
        asyncio.run(retry.call_with_retry(broken, attempts=4, delay=0))

    assert len(calls) == 1


def test_attempts_must_be_positive():
    async def noop():
        return None

    with pytest.raises(ValueError):
        asyncio.run(retry.call_with_retry(noop, attempts=0))
