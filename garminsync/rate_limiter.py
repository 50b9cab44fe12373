"""Request pacing with exponential backoff for the Garmin API."""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

DEFAULT_MIN_DELAY = timedelta(milliseconds=2000)
MAX_BACKOFF = timedelta(seconds=300)
PAUSE_DURATION = timedelta(seconds=1800)
PAUSE_THRESHOLD = 5


class SharedRateLimiter:
    """Rate limiter for concurrent requests.

    A semaphore bounds how many requests run at once, and each request
    starts at least ``min_delay`` plus the current backoff after the last.
    """

    def __init__(self, max_concurrent: int = 3, min_delay: timedelta = DEFAULT_MIN_DELAY) -> None:
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.min_delay = min_delay
        self.max_backoff = MAX_BACKOFF
        self._last_request = time.monotonic() - 10.0
        self._backoff = timedelta(0)
        self._consecutive_429s = 0
        self._lock = threading.Lock()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """Hold a request slot, waiting for the rate limit first."""
        async with self._semaphore:
            with self._lock:
                elapsed = time.monotonic() - self._last_request
                required = (self.min_delay + self._backoff).total_seconds()
                delay = max(required - elapsed, 0.0)
            if delay > 0:
                await asyncio.sleep(delay)
            with self._lock:
                self._last_request = time.monotonic()
            yield

    def on_success(self) -> None:
        """Clear the backoff after a successful request."""
        with self._lock:
            self._backoff = timedelta(0)
            self._consecutive_429s = 0

    def on_rate_limit(self) -> None:
        """Double the backoff (at least one second, at most five minutes)."""
        with self._lock:
            self._consecutive_429s += 1
            grown = max(self._backoff * 2, timedelta(seconds=1))
            self._backoff = min(grown, self.max_backoff)

    def should_pause(self) -> bool:
        """Tell whether enough rate limits came in a row to pause the sync."""
        with self._lock:
            return self._consecutive_429s >= PAUSE_THRESHOLD

    def current_backoff(self) -> timedelta:
        """Return the extra delay currently added between requests."""
        with self._lock:
            return self._backoff

    def pause_duration(self) -> timedelta:
        """Return how long to pause after repeated rate limits."""
        return PAUSE_DURATION


class RateLimiter:
    """Rate limiter for a single sequential worker."""

    def __init__(self) -> None:
        self.min_delay = DEFAULT_MIN_DELAY
        self.backoff = timedelta(seconds=1)
        self.max_backoff = MAX_BACKOFF
        self.backoff_multiplier = 2.0
        self.last_request: float | None = None
        self.consecutive_429s = 0

    async def wait(self) -> None:
        """Sleep until the next request is allowed, then record it."""
        if self.last_request is not None:
            elapsed = time.monotonic() - self.last_request
            required = (self.min_delay + self.backoff).total_seconds()
            if elapsed < required:
                await asyncio.sleep(required - elapsed)
        self.last_request = time.monotonic()

    def on_success(self) -> None:
        """Reset the backoff after a successful request."""
        self.backoff = timedelta(seconds=1)
        self.consecutive_429s = 0

    def on_rate_limit(self) -> None:
        """Grow the backoff after an HTTP 429, up to the maximum."""
        self.consecutive_429s += 1
        grown = self.backoff.total_seconds() * self.backoff_multiplier
        self.backoff = timedelta(seconds=min(grown, self.max_backoff.total_seconds()))

    def should_pause(self) -> bool:
        """Tell whether enough rate limits came in a row to pause the sync."""
        return self.consecutive_429s >= PAUSE_THRESHOLD

    def current_backoff(self) -> timedelta:
        """Return the extra delay currently added between requests."""
        return self.backoff

    def pause_duration(self) -> timedelta:
        """Return how long to pause after repeated rate limits."""
        return PAUSE_DURATION