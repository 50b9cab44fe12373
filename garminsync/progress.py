"""Progress counters shared by the parallel sync workers."""

from __future__ import annotations

import sys
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import TextIO

_HISTORY_SECONDS = 60


class StreamProgress:
    """Counts for one stream of sync work, safe to update from several threads."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.total = 0
        self.completed = 0
        self.failed = 0
        self.last_item = ""
        self._lock = threading.Lock()

    def set_total(self, total: int) -> None:
        """Set the number of items expected."""
        with self._lock:
            self.total = total

    def add_total(self, count: int) -> None:
        """Grow the expected count, for work discovered while syncing."""
        with self._lock:
            self.total += count

    def complete_one(self) -> None:
        """Count one finished item."""
        with self._lock:
            self.completed += 1

    def fail_one(self) -> None:
        """Count one failed item."""
        with self._lock:
            self.failed += 1

    def percent(self) -> int:
        """Return the completed share as a whole percentage."""
        with self._lock:
            total, completed = self.total, self.completed
        if total == 0:
            return 0
        return int((completed / total) * 100.0)

    def is_complete(self) -> bool:
        """Tell whether every expected item has finished or failed."""
        with self._lock:
            total, done = self.total, self.completed + self.failed
        return total > 0 and done >= total


class SyncProgress:
    """Progress across all sync streams, with timing and request rate."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.activities = StreamProgress("Activities")
        self.gpx = StreamProgress("GPX Downloads")
        self.health = StreamProgress("Health")
        self.performance = StreamProgress("Performance")
        self._clock = clock
        self.start_time = clock()
        self.profile_name = ""
        self.date_range = ""
        self.rate_history: deque[int] = deque([0] * _HISTORY_SECONDS, maxlen=_HISTORY_SECONDS)
        self.total_requests = 0
        self._lock = threading.Lock()

    @property
    def streams(self) -> tuple[StreamProgress, ...]:
        """The streams in display order."""
        return (self.activities, self.gpx, self.health, self.performance)

    def set_date_range(self, start: str, end: str) -> None:
        """Record the date range being synced."""
        self.date_range = f"{start} -> {end}"

    def record_request(self) -> None:
        """Count one API request."""
        with self._lock:
            self.total_requests += 1

    def update_rate_history(self) -> None:
        """Append the current request count; meant to be called once a second."""
        with self._lock:
            self.rate_history.append(self.total_requests)

    def requests_per_minute(self) -> int:
        """Return the requests made over the span of the rate history."""
        with self._lock:
            if len(self.rate_history) < 2:
                return 0
            return max(self.rate_history[-1] - self.rate_history[0], 0)

    def _elapsed(self) -> float:
        return max(self._clock() - self.start_time, 0.0)

    def elapsed_str(self) -> str:
        """Return the time since start as ``"Xm Ys"`` or ``"Ys"``."""
        secs = int(self._elapsed())
        mins, rest = divmod(secs, 60)
        return f"{mins}m {rest}s" if mins > 0 else f"{secs}s"

    def eta_str(self) -> str:
        """Estimate the time left from the average rate so far."""
        total = self.total_remaining()
        completed = self.total_completed()
        if completed == 0:
            return "calculating..."

        elapsed = self._elapsed()
        rate = completed / elapsed if elapsed > 0 else float("inf")
        if rate < 0.01:
            return "unknown"

        remaining = max(total - completed, 0)
        eta_secs = int(remaining / rate)
        if eta_secs > 3600:
            hours, rest = divmod(eta_secs, 3600)
            return f"~{hours}h {rest // 60}m"
        if eta_secs > 60:
            return f"~{eta_secs // 60} minutes"
        return f"~{eta_secs} seconds"

    def total_remaining(self) -> int:
        """Return the sum of expected items over all streams."""
        return sum(stream.total for stream in self.streams)

    def total_completed(self) -> int:
        """Return the sum of finished items over all streams."""
        return sum(stream.completed for stream in self.streams)

    def total_failed(self) -> int:
        """Return the sum of failed items over all streams."""
        return sum(stream.failed for stream in self.streams)

    def is_complete(self) -> bool:
        """Tell whether every stream with work has finished it."""
        return all(stream.total == 0 or stream.is_complete() for stream in self.streams)

    def simple_status(self) -> str:
        """Return a one-line summary of all streams and the elapsed time."""
        act, gpx, health, perf = self.streams
        return (
            f"Act: {act.completed}/{act.total} | "
            f"GPX: {gpx.completed}/{gpx.total} | "
            f"Health: {health.completed}/{health.total} | "
            f"Perf: {perf.completed}/{perf.total} | "
            f"{self.elapsed_str()}"
        )

    def print_simple_status(self, file: TextIO | None = None) -> None:
        """Overwrite the current terminal line with the summary."""
        out = sys.stdout if file is None else file
        out.write(f"\r{self.simple_status()} ")
        out.flush()