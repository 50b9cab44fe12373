# garminsync

Building blocks for keeping a local copy of your Garmin Connect data:
activity models parsed from API JSON, a SQLite database with its schema, a
persistent sync task queue that survives crashes, request rate limiting, and
progress tracking with a live terminal view.

## What is in the package

| Module | Purpose |
| --- | --- |
| `garminsync.errors` | `GarminError` and its subclasses (`AuthenticationError`, `NotAuthenticatedError`, `RateLimitedError`, `ApiError`, `DatabaseError`, `InvalidDateFormatError`, ...) |
| `garminsync.config` | `config_dir()`, `data_dir()` and `ensure_dir(path)` for per-user locations |
| `garminsync.activity` | `ActivitySummary`, `ActivityDetails`, `ActivityType`, `UploadResult` and related records, built from API JSON with `from_dict` |
| `garminsync.records` | Stored records (`Activity`, `TrackPoint`, `DailyHealth`, `PerformanceMetrics`, `WeightEntry`, ...), `TaskStatus`, the sync task kinds, `SyncTask`, and JSON helpers `task_to_json` / `task_from_json` |
| `garminsync.schema` | `migrate(conn)`, which creates and upgrades the tables on a `sqlite3` connection |
| `garminsync.database` | `Database` and `default_db_path()` |
| `garminsync.task_queue` | `TaskQueue`, a queue of sync tasks kept in the database |
| `garminsync.progress` | `StreamProgress` and `SyncProgress` counters, elapsed time and ETA |
| `garminsync.rate_limiter` | `RateLimiter` and the concurrent `SharedRateLimiter` with exponential backoff |
| `garminsync.ui` | `SyncUI`, `Theme` and `run_tui(progress, console)` for a live progress view |

Install with the test extra to run the test suite:

```
pip install -e ".[test]"
pytest
```

## Reading activity data

```python
from garminsync.activity import ActivitySummary

summary = ActivitySummary.from_dict({
    "activityId": 123,
    "activityName": "Morning Run",
    "startTimeLocal": "2025-01-01 07:30:00",
    "activityType": {"typeKey": "running"},
    "distance": 10500.0,
    "duration": 3661.0,
})

summary.display_name()        # "Morning Run"
summary.type_key()            # "running"
summary.distance_km()         # 10.5
summary.duration_formatted()  # "1:01:01"
summary.date()                # "2025-01-01"
```

Missing names fall back to `"Unnamed Activity"`, a missing type to
`"unknown"`, and a missing duration or start time to `"-"`. Durations under
an hour are shown as `M:SS`. Malformed input raises `InvalidResponseError`.
`ActivityDetails.from_dict` keeps every field it does not know in `extra`.

## Storing data

`Database.open(path)` opens or creates a SQLite file and applies the schema
migrations; `Database.in_memory()` does the same for a throwaway database.
`default_db_path()` points at `garmin.db` in your per-user data directory
(call `ensure_dir` on its parent before opening it). `Database.execute(sql,
params)` runs one statement and returns the number of changed rows; database
failures are raised as `DatabaseError`. A `Database` is also a context
manager that closes its connection on exit.

## Queueing sync work

Tasks live in the database, so an interrupted sync can pick up where it
stopped. `pop()` returns the next runnable task without changing its state;
failed tasks whose retry time has come are handed out before pending ones.

```python
from datetime import date, timedelta

from garminsync.database import Database
from garminsync.records import ActivitiesTask, DailyHealthTask, SyncTask
from garminsync.task_queue import TaskQueue

queue = TaskQueue(Database.in_memory())

queue.push(SyncTask(1, ActivitiesTask(start=0, limit=50)))
queue.push(SyncTask(1, DailyHealthTask(date=date(2025, 1, 1))))
queue.pending_count()  # 2

task = queue.pop()
queue.mark_in_progress(task.id)
try:
    ...  # fetch and store the data
except Exception as exc:
    queue.mark_failed(task.id, str(exc), timedelta(minutes=5))
else:
    queue.mark_completed(task.id)

queue.recover_in_progress()  # after a crash: in-progress tasks become pending
queue.reset_failed()         # retry every failed task right away
queue.clear_pending()        # drop all pending and failed tasks
queue.cleanup(7)             # drop completed tasks older than a week
```

The task kinds are `ActivitiesTask`, `ActivityDetailTask`,
`DownloadGpxTask`, `DailyHealthTask`, `PerformanceTask`, `WeightTask` and
`GenerateEmbeddingsTask`.

## Staying under the rate limit

Requests are spaced at least two seconds apart. For `SharedRateLimiter`,
each rate-limit response doubles the extra backoff (at least one second, at
most five minutes) and a success clears it; `RateLimiter` starts with a
one-second backoff and resets to it on success. After five rate-limit
responses in a row `should_pause()` is true and `pause_duration()` gives the
suggested pause of thirty minutes.

```python
from garminsync.rate_limiter import SharedRateLimiter

limiter = SharedRateLimiter(3)  # at most three requests at once

async def fetch_one():
    async with limiter.acquire():
        ...  # make the request
    limiter.on_success()
```

For a single sequential worker, `await RateLimiter().wait()` before each
request.

## Watching progress

```python
from garminsync.progress import SyncProgress

progress = SyncProgress()
progress.set_date_range("2025-01-01", "2025-01-31")
progress.activities.set_total(10)
progress.health.set_total(20)

progress.activities.complete_one()
progress.total_completed()   # 1
progress.total_remaining()   # 30
progress.simple_status()     # "Act: 1/10 | GPX: 0/0 | Health: 0/20 | Perf: 0/0 | 0s"
progress.print_simple_status()
```

`run_tui(progress, console)` is a coroutine that draws a live view of the
four streams (activities, GPX downloads, health, performance) with a request
rate sparkline, elapsed time, ETA and error count, using a `rich` console.
It returns a second after every stream is done, or on Ctrl+C. `SyncUI(progress)`
gives the same view as a single renderable through `render()`.

## Errors

Everything the package raises derives from `GarminError`, so one
`except GarminError` covers all of it; catch a subclass such as
`RateLimitedError` or `InvalidDateFormatError` to handle a single case.
`ApiError` carries the HTTP `status` and `message`.

## What this package does not do

There is no command-line program and no Garmin Connect network client: the
package does not log in, store credentials, call the API, or download and
upload activity files. It provides the models, storage, queue, pacing and
progress display that such a client builds on; fetching the data is left to
your own code.