"""Persistent queue of sync tasks that survives crashes."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Any

from .database import Database
from .errors import DatabaseError, InvalidParameterError, JsonError
from .records import SyncTask, TaskStatus, task_from_json, task_to_json, task_type_name

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_ts(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def _parse_ts(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        return TaskStatus.PENDING


class TaskQueue:
    """Queue of sync tasks stored in the ``sync_tasks`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        try:
            return self.db.connection().execute(sql, params)
        except sqlite3.Error as err:
            raise DatabaseError(str(err)) from err

    def push(self, task: SyncTask) -> int:
        """Add ``task`` to the queue and return its id."""
        task_data = task_to_json(task.task_type)
        with self.db.lock:
            cursor = self._query(
                "INSERT INTO sync_tasks (profile_id, task_type, task_data, status, attempts)"
                " VALUES (?, ?, ?, ?, ?)",
                (
                    task.profile_id,
                    task_type_name(task.task_type),
                    task_data,
                    str(task.status),
                    task.attempts,
                ),
            )
            task_id = cursor.lastrowid
        if task_id is None:
            raise DatabaseError("insert returned no id")
        return task_id

    def pop(self) -> SyncTask | None:
        """Return the next runnable task without changing its state.

        Failed tasks whose retry time has come go before pending ones.
        """
        with self.db.lock:
            row = self._query(
                """SELECT id, profile_id, task_type, task_data, status, attempts, last_error,
                          created_at, next_retry_at, completed_at
                   FROM sync_tasks
                   WHERE status IN ('pending', 'failed')
                     AND (next_retry_at IS NULL OR next_retry_at <= CURRENT_TIMESTAMP)
                   ORDER BY
                     CASE WHEN status = 'failed' THEN 0 ELSE 1 END,
                     created_at,
                     id
                   LIMIT 1"""
            ).fetchone()
        if row is None:
            return None

        (task_id, profile_id, _name, task_data, status, attempts, last_error,
         created_at, next_retry_at, completed_at) = row
        try:
            task_type = task_from_json(task_data if task_data is not None else "null")
        except JsonError as err:
            raise DatabaseError(err.detail) from err

        return SyncTask(
            id=task_id,
            profile_id=profile_id,
            task_type=task_type,
            status=_status(status),
            attempts=attempts or 0,
            last_error=last_error,
            created_at=_parse_ts(created_at),
            next_retry_at=_parse_ts(next_retry_at),
            completed_at=_parse_ts(completed_at),
        )

    def mark_in_progress(self, task_id: int) -> None:
        """Mark a task as being worked on."""
        self.db.execute("UPDATE sync_tasks SET status = 'in_progress' WHERE id = ?", (task_id,))

    def mark_completed(self, task_id: int) -> None:
        """Mark a task as done."""
        self.db.execute(
            "UPDATE sync_tasks SET status = 'completed', completed_at = CURRENT_TIMESTAMP"
            " WHERE id = ?",
            (task_id,),
        )

    def mark_failed(self, task_id: int, error: str, retry_after: timedelta) -> None:
        """Record a failure; the task becomes runnable again after ``retry_after``."""
        retry_at = datetime.now(timezone.utc) + retry_after
        self.db.execute(
            """UPDATE sync_tasks
               SET status = 'failed',
                   attempts = attempts + 1,
                   last_error = ?,
                   next_retry_at = ?
               WHERE id = ?""",
            (error, _format_ts(retry_at), task_id),
        )

    def recover_in_progress(self) -> int:
        """Return interrupted tasks to pending; give how many were reset."""
        return self.db.execute(
            "UPDATE sync_tasks SET status = 'pending' WHERE status = 'in_progress'"
        )

    def pending_count(self) -> int:
        """Return the number of pending and failed tasks."""
        with self.db.lock:
            (count,) = self._query(
                "SELECT COUNT(*) FROM sync_tasks WHERE status IN ('pending', 'failed')"
            ).fetchone()
        return count

    def cleanup(self, days: int) -> int:
        """Delete completed tasks older than ``days`` days; give how many."""
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidParameterError(f"days must be an integer, got {days!r}")
        return self.db.execute(
            """DELETE FROM sync_tasks
               WHERE status = 'completed'
                 AND completed_at < datetime('now', ?)""",
            (f"{-days} days",),
        )

    def reset_failed(self) -> int:
        """Return failed tasks to pending and clear their retry state."""
        return self.db.execute(
            "UPDATE sync_tasks SET status = 'pending', next_retry_at = NULL, attempts = 0"
            " WHERE status = 'failed'"
        )

    def clear_pending(self) -> int:
        """Delete all pending and failed tasks; give how many."""
        return self.db.execute("DELETE FROM sync_tasks WHERE status IN ('pending', 'failed')")