"""Tests for the resilient invoker."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from sns_client.errors import ErrorKind, SNSError
from sns_client.services.retry import invoke


class Flaky:
    """Fails ``failures`` times, then returns ``value``."""

    def __init__(self, failures: int, value: str = "ok") -> None:
        self.failures = failures
        self.value = value
        self.attempts = 0
        self.errors: list[Exception] = []

    async def __call__(self) -> str:
        self.attempts += 1
        if self.attempts <= self.failures:
            err = ConnectionError(f"boom {self.attempts}")
            self.errors.append(err)
            raise err
        return self.value


async def test_success_first_try_does_not_sleep():
    sleep = AsyncMock()
    op = Flaky(0)
    assert await invoke(op, 3, 1.0, sleep=sleep) == "ok"
    assert op.attempts == 1
    sleep.assert_not_awaited()


async def test_retries_then_succeeds():
    sleep = AsyncMock()
    op = Flaky(2)
    assert await invoke(op, 3, 1.0, sleep=sleep) == "ok"
    assert op.attempts == 3
    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]


async def test_always_failing_attempted_exactly_max_and_last_error_unchanged():
    sleep = AsyncMock()
    op = Flaky(100)
    with pytest.raises(ConnectionError) as excinfo:
        await invoke(op, 4, 0.5, sleep=sleep)
    assert op.attempts == 4
    assert excinfo.value is op.errors[-1]
    assert [c.args[0] for c in sleep.await_args_list] == [0.5, 1.0, 2.0]


async def test_single_attempt_never_sleeps():
    sleep = AsyncMock()
    op = Flaky(5)
    with pytest.raises(ConnectionError):
        await invoke(op, 1, 1.0, sleep=sleep)
    assert op.attempts == 1
    sleep.assert_not_awaited()


async def test_non_idempotent_is_at_most_once():
    sleep = AsyncMock()
    op = Flaky(1)
    with pytest.raises(ConnectionError):
        await invoke(op, 5, 1.0, idempotent=False, sleep=sleep)
    assert op.attempts == 1
    sleep.assert_not_awaited()


async def test_abort_on_skips_retry():
    sleep = AsyncMock()
    calls = 0

    async def op():
        nonlocal calls
        calls += 1
        raise SNSError(ErrorKind.NOT_FOUND, "gone")

    with pytest.raises(SNSError):
        await invoke(op, 3, 1.0, abort_on=(SNSError,), sleep=sleep)
    assert calls == 1
    sleep.assert_not_awaited()


async def test_invalid_attempts():
    with pytest.raises(ValueError):
        await invoke(Flaky(0), 0)



async def test_retries_are_logged(caplog):
    sleep = AsyncMock()
    await invoke(Flaky(1), 3, 1.0, sleep=sleep)
    assert "Retrying" in caplog.text
    assert "boom 1" in caplog.text


async def test_cancellation_is_not_retried():
    sleep = AsyncMock()
    calls = 0

    async def op():
        nonlocal calls
        calls += 1
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await invoke(op, 3, 1.0, sleep=sleep)
    assert calls == 1
    sleep.assert_not_awaited()
