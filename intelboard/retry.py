"""Retry logic with exponential backoff and jitter for remote calls."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from intelboard.errors import ConfigError, MalformedResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")
JITTER_FACTOR = 0.2


def _is_retryable_status(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def is_retryable(exc: BaseException) -> bool:
    """Classify a failure as retryable (rate limit / server error) or fatal.

    Retries on:
    - any error carrying an integer ``status_code`` of 429 or 5xx
      (RemoteServiceError, anthropic APIStatusError)
    - httpx.HTTPStatusError with a 429 or 5xx response
    - errors whose message mentions 429 or RESOURCE_EXHAUSTED
    """
    if isinstance(exc, (MalformedResponse, ConfigError)):
        return False
    if isinstance(exc, httpx.HTTPStatusError):
        return _is_retryable_status(exc.response.status_code)
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return _is_retryable_status(status)
    message = str(exc)
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


@dataclass
class RetryPolicy:
    """Run an async operation up to ``max_attempts`` times.

    Fatal errors propagate after a single call. Retryable errors are retried
    after ``initial_delay * 2**(attempt - 1)`` seconds plus up to 20% jitter.
    The error from the final attempt is re-raised unchanged.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    on_retry: Callable[[int, float, BaseException], None] | None = None
    sleep: Callable[[float], Awaitable[Any]] | None = None
    rand: Callable[[], float] = random.random

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must not be negative")

    def backoff(self, attempt: int) -> float:
        """Delay in seconds after failed attempt number ``attempt`` (1-based)."""
        delay = self.initial_delay * (2 ** (attempt - 1))
        return delay + delay * JITTER_FACTOR * self.rand()

    def max_total_delay(self) -> float:
        """Worst-case wall clock added by backoff across all attempts."""
        return self.initial_delay * (2 ** (self.max_attempts - 1) - 1) * (1 + JITTER_FACTOR)

    async def run(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        sleep = self.sleep or asyncio.sleep
        attempt = 0
        while True:
            attempt += 1
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                if not is_retryable(exc) or attempt >= self.max_attempts:
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    "Retry %d/%d after %s: %s (waiting %.2fs)",
                    attempt, self.max_attempts - 1, type(exc).__name__, exc, delay,
                )
                self._notify(attempt, delay, exc)
                await sleep(delay)

    def _notify(self, attempt: int, delay: float, exc: BaseException) -> None:
        if self.on_retry is None:
            return
        try:
            self.on_retry(attempt, delay, exc)
        except Exception:
            logger.exception("Retry hook failed on attempt %d", attempt)


async def retry_async(
    fn,
    *args,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    on_retry=None,
    **kwargs,
):
    """Call an async function with exponential backoff on transient failures."""
    policy = RetryPolicy(
        max_attempts=max_attempts,
        initial_delay=initial_delay,
        on_retry=on_retry,
    )
    return await policy.run(fn, *args, **kwargs)
