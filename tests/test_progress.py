import io

import pytest

from garminsync.progress import StreamProgress, SyncProgress


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_stream_progress():
    progress = StreamProgress("Test")

    progress.set_total(100)
    assert progress.total == 100
    assert progress.percent() == 0

    progress.complete_one()
    assert progress.completed == 1
    assert progress.percent() == 1

    for _ in range(49):
        progress.complete_one()
    assert progress.percent() == 50


def test_sync_progress():
    progress = SyncProgress()

    progress.activities.set_total(10)
    progress.health.set_total(20)

    assert progress.total_remaining() == 30
    assert progress.total_completed() == 0

    progress.activities.complete_one()
    progress.health.complete_one()

    assert progress.total_completed() == 2


def test_percent_with_zero_total_is_zero():
    assert StreamProgress("Empty").percent() == 0


def test_add_total_accumulates():
    stream = StreamProgress("GPX")
    stream.add_total(3)
    stream.add_total(4)
    assert stream.total == 7


def test_stream_complete_counts_failures():
    stream = StreamProgress("Health")
    assert stream.is_complete() is False
    stream.set_total(2)
    stream.complete_one()
    assert stream.is_complete() is False
    stream.fail_one()
    assert stream.failed == 1
    assert stream.is_complete() is True


def test_sync_complete_ignores_empty_streams():
    progress = SyncProgress()
    assert progress.is_complete() is True
    progress.activities.set_total(1)
    assert progress.is_complete() is False
    progress.activities.complete_one()
    assert progress.is_complete() is True


def test_total_failed():
    progress = SyncProgress()
    progress.gpx.fail_one()
    progress.performance.fail_one()
    assert progress.total_failed() == 2


def test_set_date_range():
    progress = SyncProgress()
    progress.set_date_range("2025-01-01", "2025-01-31")
    assert progress.date_range == "2025-01-01 -> 2025-01-31"


def test_rate_history_starts_with_sixty_zeros():
    progress = SyncProgress()
    assert list(progress.rate_history) == [0] * 60
    assert progress.requests_per_minute() == 0


def test_requests_per_minute_tracks_window():
    progress = SyncProgress()
    for _ in range(5):
        progress.record_request()
    progress.update_rate_history()
    assert len(progress.rate_history) == 60
    assert progress.rate_history[-1] == 5
    assert progress.requests_per_minute() == 5

    for _ in range(59):
        progress.update_rate_history()
    assert progress.requests_per_minute() == 0


def test_elapsed_str(clock):
    progress = SyncProgress(clock=clock)
    clock.now += 42
    assert progress.elapsed_str() == "42s"
    clock.now += 83
    assert progress.elapsed_str() == "2m 5s"


def test_eta_calculating_without_progress(clock):
    progress = SyncProgress(clock=clock)
    progress.activities.set_total(10)
    assert progress.eta_str() == "calculating..."


def test_eta_seconds(clock):
    progress = SyncProgress(clock=clock)
    progress.activities.set_total(10)
    for _ in range(5):
        progress.activities.complete_one()
    clock.now += 5
    assert progress.eta_str() == "~5 seconds"


def test_eta_minutes(clock):
    progress = SyncProgress(clock=clock)
    progress.health.set_total(100)
    for _ in range(10):
        progress.health.complete_one()
    clock.now += 10
    assert progress.eta_str() == "~1 minutes"


def test_eta_hours(clock):
    progress = SyncProgress(clock=clock)
    progress.health.set_total(4000)
    progress.health.complete_one()
    clock.now += 1
    assert progress.eta_str() == "~1h 6m"


def test_eta_unknown_when_too_slow(clock):
    progress = SyncProgress(clock=clock)
    progress.health.set_total(10)
    progress.health.complete_one()
    clock.now += 200
    assert progress.eta_str() == "unknown"


def test_simple_status(clock):
    progress = SyncProgress(clock=clock)
    progress.activities.set_total(10)
    progress.activities.complete_one()
    progress.health.set_total(20)
    assert progress.simple_status() == "Act: 1/10 | GPX: 0/0 | Health: 0/20 | Perf: 0/0 | 0s"


def test_print_simple_status(clock):
    progress = SyncProgress(clock=clock)
    progress.gpx.set_total(3)
    out = io.StringIO()
    progress.print_simple_status(out)
    assert out.getvalue() == "\rAct: 0/0 | GPX: 0/3 | Health: 0/0 | Perf: 0/0 | 0s "