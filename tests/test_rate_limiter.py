import asyncio
import time
from datetime import timedelta

import pytest

from garminsync.rate_limiter import RateLimiter, SharedRateLimiter


def test_rate_limiter_defaults():
    limiter = RateLimiter()
    assert limiter.min_delay == timedelta(milliseconds=2000)
    assert limiter.backoff == timedelta(seconds=1)


def test_exponential_backoff():
    limiter = RateLimiter()

    limiter.on_rate_limit()
    assert limiter.backoff == timedelta(seconds=2)

    limiter.on_rate_limit()
    assert limiter.backoff == timedelta(seconds=4)

    limiter.on_rate_limit()
    assert limiter.backoff == timedelta(seconds=8)


def test_backoff_max():
    limiter = RateLimiter()
    for _ in range(20):
        limiter.on_rate_limit()
    assert limiter.backoff <= limiter.max_backoff
    assert limiter.current_backoff() == timedelta(seconds=300)


def test_reset_on_success():
    limiter = RateLimiter()

    limiter.on_rate_limit()
    limiter.on_rate_limit()
    assert limiter.backoff > timedelta(seconds=1)

    limiter.on_success()
    assert limiter.backoff == timedelta(seconds=1)
    assert limiter.consecutive_429s == 0


def test_should_pause():
    limiter = RateLimiter()

    for _ in range(4):
        limiter.on_rate_limit()
        assert limiter.should_pause() is False

    limiter.on_rate_limit()
    assert limiter.should_pause() is True


def test_pause_duration():
    assert RateLimiter().pause_duration() == timedelta(minutes=30)
    assert SharedRateLimiter().pause_duration() == timedelta(minutes=30)


def test_shared_rate_limiter():
    limiter = SharedRateLimiter(3)

    limiter.on_rate_limit()
    assert limiter.should_pause() is False

    for _ in range(4):
        limiter.on_rate_limit()
    assert limiter.should_pause() is True

    limiter.on_success()
    assert limiter.should_pause() is False


def test_shared_backoff_growth_and_reset():
    limiter = SharedRateLimiter()
    assert limiter.current_backoff() == timedelta(0)
    limiter.on_rate_limit()
    assert limiter.current_backoff() == timedelta(seconds=1)
    limiter.on_rate_limit()
    assert limiter.current_backoff() == timedelta(seconds=2)
    for _ in range(20):
        limiter.on_rate_limit()
    assert limiter.current_backoff() == timedelta(seconds=300)
    limiter.on_success()
    assert limiter.current_backoff() == timedelta(0)


@pytest.mark.asyncio
async def test_wait_spaces_requests():
    limiter = RateLimiter()
    limiter.min_delay = timedelta(milliseconds=50)
    limiter.backoff = timedelta(0)

    started = time.monotonic()
    await limiter.wait()
    first = time.monotonic() - started
    assert first < 0.05

    await limiter.wait()
    assert time.monotonic() - started >= 0.045
    assert limiter.current_backoff() == timedelta(0)
    assert limiter.should_pause() is False


@pytest.mark.asyncio
async def test_shared_acquire_spaces_requests():
    limiter = SharedRateLimiter(1, min_delay=timedelta(milliseconds=50))

    started = time.monotonic()
    async with limiter.acquire():
        pass
    assert time.monotonic() - started < 0.05

    async with limiter.acquire():
        pass
    assert time.monotonic() - started >= 0.045
    assert limiter.current_backoff() == timedelta(0)
    assert limiter.should_pause() is False


@pytest.mark.asyncio
async def test_shared_acquire_bounds_concurrency():
    limiter = SharedRateLimiter(2, min_delay=timedelta(0))
    active = 0
    peak = 0

    async def worker() -> None:
        nonlocal active, peak
        async with limiter.acquire():
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(worker() for _ in range(6)))
    assert peak == 2
    assert active == 0
    assert limiter.current_backoff() == timedelta(0)
    assert limiter.should_pause() is False