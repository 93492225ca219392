"""Tests for retry logic."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from intelboard.errors import MalformedResponse, RemoteServiceError
from intelboard.retry import RetryPolicy, is_retryable, retry_async


class _SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def _policy(**kwargs) -> tuple[RetryPolicy, _SleepRecorder]:
    sleep = _SleepRecorder()
    return RetryPolicy(sleep=sleep, **kwargs), sleep


@pytest.mark.asyncio
async def test_retry_succeeds_on_first_try():
    """No retries needed when function succeeds."""
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        return "ok"

    policy, sleep = _policy()
    assert await policy.run(fn) == "ok"
    assert call_count == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_retry_succeeds_after_two_retryable_failures():
    """Two rate-limit/server failures then success: three calls in total."""
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        if call_count == 1:
            raise RemoteServiceError(429, "rate limited")
        if call_count == 2:
            raise RemoteServiceError(503, "unavailable")
        return "ok"

    policy, sleep = _policy()
    assert await policy.run(fn) == "ok"
    assert call_count == 3
    assert len(sleep.delays) == 2


@pytest.mark.asyncio
async def test_fatal_error_propagates_after_one_call():
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        raise RemoteServiceError(400, "bad request")

    policy, sleep = _policy()
    with pytest.raises(RemoteServiceError, match="bad request"):
        await policy.run(fn)
    assert call_count == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_malformed_response_is_not_retried():
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        raise MalformedResponse("package", "links missing")

    policy, _ = _policy()
    with pytest.raises(MalformedResponse):
        await policy.run(fn)
    assert call_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [1, 2, 3, 5])
async def test_exhausted_retries_raise_last_error(max_attempts):
    """The operation runs exactly max_attempts times and the last error surfaces."""
    errors = []

    async def fn():
        exc = RemoteServiceError(500, f"failure {len(errors)}")
        errors.append(exc)
        raise exc

    policy, sleep = _policy(max_attempts=max_attempts)
    with pytest.raises(RemoteServiceError) as info:
        await policy.run(fn)
    assert len(errors) == max_attempts
    assert info.value is errors[-1]
    assert len(sleep.delays) == max_attempts - 1


@pytest.mark.asyncio
@pytest.mark.parametrize("rand", [0.0, 0.5, 0.999999])
async def test_backoff_delays_within_bounds(rand):
    async def fn():
        raise RemoteServiceError(429)

    policy, sleep = _policy(max_attempts=4, initial_delay=1.0, rand=lambda: rand)
    with pytest.raises(RemoteServiceError):
        await policy.run(fn)

    for n, delay in enumerate(sleep.delays, start=1):
        base = 1.0 * 2 ** (n - 1)
        assert base <= delay <= base * 1.2
    assert sum(sleep.delays) <= policy.max_total_delay()


def test_backoff_formula():
    policy = RetryPolicy(initial_delay=1.0, rand=lambda: 0.5)
    assert policy.backoff(1) == pytest.approx(1.1)
    assert policy.backoff(2) == pytest.approx(2.2)
    assert policy.backoff(3) == pytest.approx(4.4)


def test_max_total_delay():
    policy = RetryPolicy(max_attempts=3, initial_delay=1.0)
    assert policy.max_total_delay() == pytest.approx(3.6)


def test_invalid_max_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)


@pytest.mark.asyncio
async def test_retry_hook_observes_each_retry():
    seen = []
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise RemoteServiceError(502)
        return "ok"

    policy, _ = _policy(on_retry=lambda attempt, delay, exc: seen.append((attempt, exc.status_code)))
    assert await policy.run(fn) == "ok"
    assert seen == [(1, 502), (2, 502)]


@pytest.mark.asyncio
async def test_failing_hook_does_not_change_control_flow():
    call_count = 0

    def hook(attempt, delay, exc):
        raise RuntimeError("telemetry down")

    async def fn():
        nonlocal call_count
        call_count += 1
        if call_count < 2:
            raise RemoteServiceError(503)
        return "ok"

    policy, _ = _policy(on_retry=hook)
    assert await policy.run(fn) == "ok"
    assert call_count == 2


@pytest.mark.asyncio
async def test_backoff_sleep_is_cancelable():
    call_count = 0

    async def fn():
        nonlocal call_count
        call_count += 1
        raise RemoteServiceError(429)

    policy = RetryPolicy(initial_delay=30.0)
    task = asyncio.create_task(policy.run(fn))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert call_count == 1


@pytest.mark.asyncio
async def test_retry_async_passes_arguments():
    async def fn(a, b=0):
        return a + b

    assert await retry_async(fn, 1, b=2, initial_delay=0) == 3


def _http_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://example.com")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


@pytest.mark.parametrize(
    "exc, expected",
    [
        (RemoteServiceError(429), True),
        (RemoteServiceError(500), True),
        (RemoteServiceError(599), True),
        (RemoteServiceError(400), False),
        (RemoteServiceError(401), False),
        (RemoteServiceError(404), False),
        (_http_error(429), True),
        (_http_error(503), True),
        (_http_error(403), False),
        (Exception("got status 429 from upstream"), True),
        (Exception("RESOURCE_EXHAUSTED: quota"), True),
        (ValueError("bad input"), False),
        (MalformedResponse("dossier", "not JSON"), False),
    ],
)
def test_is_retryable(exc, expected):
    assert is_retryable(exc) is expected
