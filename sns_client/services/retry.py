"""Bounded retry with deterministic exponential backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_DELAY = 1.0
BACKOFF_MULTIPLIER = 2


async def invoke(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_ATTEMPTS,
    initial_delay: float = DEFAULT_DELAY,
    *,
    idempotent: bool = True,
    abort_on: tuple[type[BaseException], ...] = (),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or attempts run out.

    Waits ``initial_delay * 2**n`` between attempts, no jitter. The last
    failure is re-raised unchanged. Exceptions in ``abort_on`` are never
    retried. Non-idempotent operations get exactly one attempt: a failed
    submission may still have landed, so it is never repeated.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts if idempotent else 1),
        wait=wait_exponential(multiplier=initial_delay, exp_base=BACKOFF_MULTIPLIER),
        retry=retry_if_exception_type(Exception) & retry_if_not_exception_type(abort_on),
        before_sleep=before_sleep_log(log, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)
