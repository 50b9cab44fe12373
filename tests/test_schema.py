import sqlite3

import pytest

from garminsync.errors import DatabaseError
from garminsync.schema import SCHEMA_VERSION, migrate


def _tables(conn):
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {name for (name,) in rows}


def test_migration_v1_creates_tables():
    conn = sqlite3.connect(":memory:")
    migrate(conn)
    tables = _tables(conn)
    for name in (
        "profiles",
        "activities",
        "track_points",
        "daily_health",
        "performance_metrics",
        "weight_entries",
        "sync_state",
        "sync_tasks",
        "schema_migrations",
    ):
        assert name in tables


def test_migration_idempotent():
    conn = sqlite3.connect(":memory:")
    migrate(conn)
    migrate(conn)
    rows = conn.execute("SELECT version FROM schema_migrations").fetchall()
    assert rows == [(SCHEMA_VERSION,)]


def test_migration_records_version():
    conn = sqlite3.connect(":memory:")
    migrate(conn)
    (version,) = conn.execute("SELECT MAX(version) FROM schema_migrations").fetchone()
    assert version == 1


def test_sync_tasks_defaults():
    conn = sqlite3.connect(":memory:")
    migrate(conn)
    conn.execute("INSERT INTO sync_tasks (task_type) VALUES ('weight')")
    status, attempts, created = conn.execute(
        "SELECT status, attempts, created_at FROM sync_tasks"
    ).fetchone()
    assert status == "pending"
    assert attempts == 0
    assert len(created) == 19


def test_failed_statement_reports_prefix():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE daily_health (x INTEGER)")
    with pytest.raises(DatabaseError) as info:
        migrate(conn)
    message = str(info.value)
    assert message.startswith("Database error: CREATE INDEX IF NOT EXISTS idx_health_date")
    assert "profile_id" in message


def test_closed_connection_raises():
    conn = sqlite3.connect(":memory:")
    conn.close()
    with pytest.raises(DatabaseError):
        migrate(conn)