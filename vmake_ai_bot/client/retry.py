"""
Exponential backoff for idempotent client calls.

Only reads (health checks, connection tests) are wrapped. Writes are never
retried because the server has no deduplication key to make a repeat safe.
"""

import asyncio
import functools
from typing import Awaitable, Callable, TypeVar

import structlog

from ..core.exceptions import ApiTimeoutError, NetworkError, ServerResponseError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def backoff(attempt: int, *, base: float = 1.0, cap: float = 10.0) -> float:
    """Delay in seconds before retry number *attempt* (1-based): base, 2*base, 4*base, ... up to cap."""
    return min(cap, base * (2 ** max(0, attempt - 1)))


def should_retry(exc: BaseException) -> bool:
    """Network failures, timeouts and 5xx answers are worth another try."""
    if isinstance(exc, (NetworkError, ApiTimeoutError)):
        return True
    if isinstance(exc, ServerResponseError):
        return exc.is_server_error
    return False


async def retry_with_backoff(
    call: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base: float = 1.0,
    cap: float = 10.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run *call* up to *attempts* times, sleeping with exponential backoff between failures."""
    attempt = 1
    while True:
        try:
            return await call()
        except Exception as e:
            if attempt >= attempts or not should_retry(e):
                raise
            delay = backoff(attempt, base=base, cap=cap)
            logger.warning(
                "Retrying request",
                attempt=attempt,
                delay_seconds=delay,
                error=str(e),
                error_type=type(e).__name__,
            )
            await sleep(delay)
            attempt += 1


def idempotent(method):
    """
    Decorate an async client method so it retries with the client's retry policy.

    The instance must expose retry_attempts, retry_base_delay, retry_max_delay
    and sleep.
    """

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        return await retry_with_backoff(
            lambda: method(self, *args, **kwargs),
            attempts=self.retry_attempts,
            base=self.retry_base_delay,
            cap=self.retry_max_delay,
            sleep=self.sleep,
        )

    return wrapper
