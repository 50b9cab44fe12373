from pathlib import Path

import pytest

from garminsync.database import Database, default_db_path
from garminsync.errors import DatabaseError


def test_in_memory_database_has_no_path():
    db = Database.in_memory()
    assert db.path is None


def test_execute_returns_changed_rows():
    db = Database.in_memory()
    count = db.execute(
        "INSERT INTO profiles (display_name) VALUES (?)", ("runner",)
    )
    assert count == 1


def test_execute_select_returns_zero():
    db = Database.in_memory()
    assert db.execute("SELECT 1") == 0


def test_execute_invalid_sql_raises():
    db = Database.in_memory()
    with pytest.raises(DatabaseError):
        db.execute("SELECT * FROM missing_table")


def test_open_file_persists(tmp_path):
    path = tmp_path / "garmin.db"
    with Database.open(path) as db:
        assert db.path == str(path)
        db.execute("INSERT INTO profiles (display_name) VALUES (?)", ("runner",))
    with Database.open(path) as db:
        rows = db.connection().execute("SELECT display_name FROM profiles").fetchall()
        versions = db.connection().execute("SELECT version FROM schema_migrations").fetchall()
    assert rows == [("runner",)]
    assert versions == [(1,)]


def test_open_in_missing_directory_raises(tmp_path):
    with pytest.raises(DatabaseError):
        Database.open(tmp_path / "missing" / "dir" / "garmin.db")


def test_execute_after_close_raises():
    db = Database.in_memory()
    db.close()
    with pytest.raises(DatabaseError):
        db.execute("SELECT 1")


def test_migrate_is_idempotent():
    db = Database.in_memory()
    db.migrate()
    rows = db.connection().execute("SELECT COUNT(*) FROM schema_migrations").fetchone()
    assert rows == (1,)


def test_default_db_path():
    path = Path(default_db_path())
    assert path.name == "garmin.db"
    assert path.parent.name == "garmin"