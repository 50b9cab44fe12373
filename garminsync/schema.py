"""Schema of the local database and its migrations."""

from __future__ import annotations

import sqlite3

from .errors import DatabaseError

SCHEMA_VERSION = 1

_ID = "id INTEGER PRIMARY KEY AUTOINCREMENT"
_PROFILE_REF = "profile_id INTEGER REFERENCES profiles(profile_id)"
_SYNCED = "synced_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
_CREATED = "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
_DAY = "date DATE NOT NULL"
_PER_DAY = "UNIQUE(profile_id, date)"
_RAW = "raw_json JSON"


def _typed(names: str, sql_type: str) -> list[str]:
    """Column definitions of one type for whitespace-separated names."""
    return [f"{name} {sql_type}" for name in names.split()]


def _ints(names: str) -> list[str]:
    return _typed(names, "INTEGER")


def _floats(names: str) -> list[str]:
    return _typed(names, "DOUBLE")


def _texts(names: str) -> list[str]:
    return _typed(names, "TEXT")


def _table(name: str, parts: list[str]) -> str:
    return f"CREATE TABLE IF NOT EXISTS {name} ({', '.join(parts)})"


def _index(name: str, table: str, columns: str) -> str:
    return f"CREATE INDEX IF NOT EXISTS {name} ON {table}({columns})"


_MIGRATIONS_TABLE = _table(
    "schema_migrations",
    ["version INTEGER PRIMARY KEY", "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"],
)

_PROFILES = [
    "profile_id INTEGER PRIMARY KEY AUTOINCREMENT",
    "display_name TEXT NOT NULL UNIQUE",
    "user_id INTEGER",
    _CREATED,
    "last_sync_at TIMESTAMP",
]

_ACTIVITIES = [
    "activity_id INTEGER PRIMARY KEY",
    _PROFILE_REF,
    *_texts("activity_name activity_type"),
    *_typed("start_time_local start_time_gmt", "TIMESTAMP"),
    *_floats("duration_sec distance_m"),
    *_ints("calories avg_hr max_hr"),
    *_floats("avg_speed max_speed elevation_gain elevation_loss avg_cadence"),
    *_ints("avg_power normalized_power"),
    *_floats(
        "training_effect training_load start_lat start_lon end_lat end_lon "
        "ground_contact_time vertical_oscillation stride_length"
    ),
    "location_name TEXT",
    _RAW,
    _SYNCED,
]

_TRACK_POINTS = [
    _ID,
    "activity_id INTEGER REFERENCES activities(activity_id)",
    "timestamp TIMESTAMP NOT NULL",
    *_floats("lat lon elevation"),
    *_ints("heart_rate cadence power"),
    "speed DOUBLE",
]

_DAILY_HEALTH = [
    _ID,
    _PROFILE_REF,
    _DAY,
    *_ints(
        "steps step_goal total_calories active_calories bmr_calories resting_hr "
        "sleep_seconds deep_sleep_seconds light_sleep_seconds rem_sleep_seconds "
        "sleep_score avg_stress max_stress body_battery_start body_battery_end "
        "hrv_weekly_avg hrv_last_night"
    ),
    "hrv_status TEXT",
    "avg_respiration DOUBLE",
    *_ints("avg_spo2 lowest_spo2 hydration_ml moderate_intensity_min vigorous_intensity_min"),
    _RAW,
    _SYNCED,
    _PER_DAY,
]

_PERFORMANCE = [
    _ID,
    _PROFILE_REF,
    _DAY,
    "vo2max DOUBLE",
    *_ints("fitness_age training_readiness"),
    *_texts("training_readiness_level training_status"),
    *_floats("acute_load chronic_load load_ratio"),
    *_texts("load_ratio_status load_focus"),
    "lactate_threshold_hr INTEGER",
    "lactate_threshold_pace DOUBLE",
    *_ints(
        "race_5k_sec race_10k_sec race_half_sec race_marathon_sec "
        "endurance_score hill_score"
    ),
    _RAW,
    _SYNCED,
    _PER_DAY,
]

_WEIGHT = [
    _ID,
    _PROFILE_REF,
    _DAY,
    *_floats("weight_kg bmi body_fat_pct muscle_mass_kg"),
    _SYNCED,
    _PER_DAY,
]

_SYNC_STATE = [
    _PROFILE_REF,
    "data_type TEXT NOT NULL",
    "last_sync_date DATE",
    "last_activity_id INTEGER",
    "PRIMARY KEY (profile_id, data_type)",
]

_SYNC_TASKS = [
    _ID,
    "profile_id INTEGER",
    "task_type TEXT NOT NULL",
    "task_data JSON",
    "status TEXT DEFAULT 'pending'",
    "attempts INTEGER DEFAULT 0",
    "last_error TEXT",
    _CREATED,
    *_typed("next_retry_at completed_at", "TIMESTAMP"),
]

_V1_STATEMENTS = (
    _table("profiles", _PROFILES),
    _table("activities", _ACTIVITIES),
    _table("track_points", _TRACK_POINTS),
    _index("idx_trackpoints_activity", "track_points", "activity_id, timestamp"),
    _table("daily_health", _DAILY_HEALTH),
    _index("idx_health_date", "daily_health", "profile_id, date"),
    _table("performance_metrics", _PERFORMANCE),
    _table("weight_entries", _WEIGHT),
    _table("sync_state", _SYNC_STATE),
    _table("sync_tasks", _SYNC_TASKS),
    _index("idx_sync_tasks_status", "sync_tasks", "status, next_retry_at"),
    "INSERT INTO schema_migrations (version) VALUES (1)",
)


def _current_version(conn: sqlite3.Connection) -> int:
    try:
        row = conn.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations").fetchone()
    except sqlite3.Error:
        return 0
    return int(row[0]) if row else 0


def _migration_v1(conn: sqlite3.Connection) -> None:
    for sql in _V1_STATEMENTS:
        try:
            conn.execute(sql)
        except sqlite3.Error as err:
            if conn.in_transaction:
                conn.rollback()
            raise DatabaseError(f"{sql[:50]}: {err}") from err


def migrate(conn: sqlite3.Connection) -> None:
    """Bring the schema of ``conn`` up to the current version."""
    try:
        conn.execute(_MIGRATIONS_TABLE)
    except sqlite3.Error as err:
        raise DatabaseError(str(err)) from err

    if _current_version(conn) < 1:
        _migration_v1(conn)

    try:
        conn.commit()
    except sqlite3.Error as err:
        raise DatabaseError(str(err)) from err