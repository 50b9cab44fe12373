"""Connection management for the local SQLite database."""

from __future__ import annotations

import os
import sqlite3
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Union

from . import schema
from .config import data_dir
from .errors import DatabaseError

Params = Union[Iterable[Any], Mapping[str, Any]]

_MEMORY = ":memory:"


class Database:
    """A migrated database connection shared under a lock.

    Use ``lock`` around any direct work on ``connection()``.
    """

    def __init__(self, conn: sqlite3.Connection, path: str | None) -> None:
        self._conn = conn
        self.path = path
        self.lock = threading.RLock()

    @classmethod
    def _connect(cls, target: str, path: str | None) -> Database:
        try:
            conn = sqlite3.connect(target, check_same_thread=False, isolation_level=None)
        except sqlite3.Error as err:
            raise DatabaseError(str(err)) from err
        db = cls(conn, path)
        try:
            db.migrate()
        except DatabaseError:
            conn.close()
            raise
        return db

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> Database:
        """Open or create the database file at ``path`` and migrate it."""
        path_str = os.fspath(path)
        return cls._connect(path_str, path_str)

    @classmethod
    def in_memory(cls) -> Database:
        """Create a migrated database that lives only in memory."""
        return cls._connect(_MEMORY, None)

    def migrate(self) -> None:
        """Apply any pending schema migrations."""
        with self.lock:
            schema.migrate(self._conn)

    def execute(self, sql: str, params: Params = ()) -> int:
        """Run one statement and return the number of rows it changed."""
        with self.lock:
            try:
                cursor = self._conn.execute(sql, params)
            except sqlite3.Error as err:
                raise DatabaseError(str(err)) from err
            return max(cursor.rowcount, 0)

    def connection(self) -> sqlite3.Connection:
        """Return the underlying connection for more complex work."""
        return self._conn

    def close(self) -> None:
        """Close the connection."""
        with self.lock:
            self._conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def default_db_path() -> str:
    """Return the path of the database in the user's data directory."""
    return str(data_dir() / "garmin.db")