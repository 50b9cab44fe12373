"""Rows stored in the local database and the sync task types."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Union

from .errors import JsonError


@dataclass
class Profile:
    """A Garmin account tracked locally."""

    profile_id: int
    display_name: str
    user_id: int | None = None
    created_at: datetime | None = None
    last_sync_at: datetime | None = None


@dataclass
class Activity:
    """Activity summary as stored in the database."""

    activity_id: int
    profile_id: int
    activity_name: str | None = None
    activity_type: str | None = None
    start_time_local: datetime | None = None
    start_time_gmt: datetime | None = None
    duration_sec: float | None = None
    distance_m: float | None = None
    calories: int | None = None
    avg_hr: int | None = None
    max_hr: int | None = None
    avg_speed: float | None = None
    max_speed: float | None = None
    elevation_gain: float | None = None
    elevation_loss: float | None = None
    avg_cadence: float | None = None
    avg_power: int | None = None
    normalized_power: int | None = None
    training_effect: float | None = None
    training_load: float | None = None
    start_lat: float | None = None
    start_lon: float | None = None
    end_lat: float | None = None
    end_lon: float | None = None
    ground_contact_time: float | None = None
    vertical_oscillation: float | None = None
    stride_length: float | None = None
    location_name: str | None = None
    raw_json: Any = None


@dataclass
class TrackPoint:
    """One GPS sample with sensor readings."""

    activity_id: int
    timestamp: datetime
    id: int | None = None
    lat: float | None = None
    lon: float | None = None
    elevation: float | None = None
    heart_rate: int | None = None
    cadence: int | None = None
    power: int | None = None
    speed: float | None = None


@dataclass
class DailyHealth:
    """Health metrics for one day."""

    profile_id: int
    date: date
    id: int | None = None
    steps: int | None = None
    step_goal: int | None = None
    total_calories: int | None = None
    active_calories: int | None = None
    bmr_calories: int | None = None
    resting_hr: int | None = None
    sleep_seconds: int | None = None
    deep_sleep_seconds: int | None = None
    light_sleep_seconds: int | None = None
    rem_sleep_seconds: int | None = None
    sleep_score: int | None = None
    avg_stress: int | None = None
    max_stress: int | None = None
    body_battery_start: int | None = None
    body_battery_end: int | None = None
    hrv_weekly_avg: int | None = None
    hrv_last_night: int | None = None
    hrv_status: str | None = None
    avg_respiration: float | None = None
    avg_spo2: int | None = None
    lowest_spo2: int | None = None
    hydration_ml: int | None = None
    moderate_intensity_min: int | None = None
    vigorous_intensity_min: int | None = None
    raw_json: Any = None


@dataclass
class PerformanceMetrics:
    """Performance metrics for one day."""

    profile_id: int
    date: date
    id: int | None = None
    vo2max: float | None = None
    fitness_age: int | None = None
    training_readiness: int | None = None
    training_status: str | None = None
    lactate_threshold_hr: int | None = None
    lactate_threshold_pace: float | None = None
    race_5k_sec: int | None = None
    race_10k_sec: int | None = None
    race_half_sec: int | None = None
    race_marathon_sec: int | None = None
    endurance_score: int | None = None
    hill_score: int | None = None
    raw_json: Any = None


@dataclass
class WeightEntry:
    """A body weight measurement."""

    profile_id: int
    date: date
    id: int | None = None
    weight_kg: float | None = None
    bmi: float | None = None
    body_fat_pct: float | None = None
    muscle_mass_kg: float | None = None


@dataclass
class SyncState:
    """Marker for incremental sync of one data type."""

    profile_id: int
    data_type: str
    last_sync_date: date | None = None
    last_activity_id: int | None = None


class TaskStatus(str, Enum):
    """Lifecycle state of a queued sync task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


def _field(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise JsonError(f"missing field `{key}`")
    return data[key]


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise JsonError(f"field `{key}`: expected an integer")
    return value


def _date_field(data: Mapping[str, Any], key: str) -> date:
    value = _field(data, key)
    if not isinstance(value, str):
        raise JsonError(f"field `{key}`: expected a date string")
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise JsonError(f"field `{key}`: {err}") from err


def _opt_str_field(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise JsonError(f"field `{key}`: expected a string")
    return value


@dataclass(frozen=True)
class ActivitiesTask:
    """Fetch one page of the activity list."""

    start: int
    limit: int
    kind: ClassVar[str] = "activities"

    def _payload(self) -> dict[str, Any]:
        return {"start": self.start, "limit": self.limit}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> ActivitiesTask:
        return cls(start=_int_field(data, "start"), limit=_int_field(data, "limit"))


@dataclass(frozen=True)
class ActivityDetailTask:
    """Fetch the details of one activity."""

    activity_id: int
    kind: ClassVar[str] = "activity_detail"

    def _payload(self) -> dict[str, Any]:
        return {"activity_id": self.activity_id}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> ActivityDetailTask:
        return cls(activity_id=_int_field(data, "activity_id"))


@dataclass(frozen=True)
class DownloadGpxTask:
    """Download the GPX track of one activity."""

    activity_id: int
    activity_name: str | None = None
    activity_date: str | None = None
    kind: ClassVar[str] = "download_gpx"

    def _payload(self) -> dict[str, Any]:
        return {
            "activity_id": self.activity_id,
            "activity_name": self.activity_name,
            "activity_date": self.activity_date,
        }

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> DownloadGpxTask:
        return cls(
            activity_id=_int_field(data, "activity_id"),
            activity_name=_opt_str_field(data, "activity_name"),
            activity_date=_opt_str_field(data, "activity_date"),
        )


@dataclass(frozen=True)
class DailyHealthTask:
    """Fetch health metrics for one day."""

    date: date
    kind: ClassVar[str] = "daily_health"

    def _payload(self) -> dict[str, Any]:
        return {"date": self.date.isoformat()}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> DailyHealthTask:
        return cls(date=_date_field(data, "date"))


@dataclass(frozen=True)
class PerformanceTask:
    """Fetch performance metrics for one day."""

    date: date
    kind: ClassVar[str] = "performance"

    def _payload(self) -> dict[str, Any]:
        return {"date": self.date.isoformat()}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> PerformanceTask:
        return cls(date=_date_field(data, "date"))


@dataclass(frozen=True)
class WeightTask:
    """Fetch weight entries over a date range; stored as ``from``/``to``."""

    from_date: date
    to_date: date
    kind: ClassVar[str] = "weight"

    def _payload(self) -> dict[str, Any]:
        return {"from": self.from_date.isoformat(), "to": self.to_date.isoformat()}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> WeightTask:
        return cls(from_date=_date_field(data, "from"), to_date=_date_field(data, "to"))


@dataclass(frozen=True)
class GenerateEmbeddingsTask:
    """Compute embeddings for a batch of activities."""

    activity_ids: tuple[int, ...]
    kind: ClassVar[str] = "generate_embeddings"

    def __post_init__(self) -> None:
        object.__setattr__(self, "activity_ids", tuple(self.activity_ids))

    def _payload(self) -> dict[str, Any]:
        return {"activity_ids": list(self.activity_ids)}

    @classmethod
    def _load(cls, data: Mapping[str, Any]) -> GenerateEmbeddingsTask:
        ids = _field(data, "activity_ids")
        if not isinstance(ids, list) or any(
            isinstance(i, bool) or not isinstance(i, int) for i in ids
        ):
            raise JsonError("field `activity_ids`: expected a list of integers")
        return cls(activity_ids=tuple(ids))


SyncTaskType = Union[
    ActivitiesTask,
    ActivityDetailTask,
    DownloadGpxTask,
    DailyHealthTask,
    PerformanceTask,
    WeightTask,
    GenerateEmbeddingsTask,
]

_TASK_CLASSES: dict[str, Any] = {
    cls.kind: cls
    for cls in (
        ActivitiesTask,
        ActivityDetailTask,
        DownloadGpxTask,
        DailyHealthTask,
        PerformanceTask,
        WeightTask,
        GenerateEmbeddingsTask,
    )
}


def task_type_name(task_type: SyncTaskType) -> str:
    """Return the tag under which a task type is stored."""
    if type(task_type) not in _TASK_CLASSES.values():
        raise TypeError(f"not a sync task type: {task_type!r}")
    return task_type.kind


def task_to_dict(task_type: SyncTaskType) -> dict[str, Any]:
    """Return the tagged mapping that represents a task type."""
    return {"type": task_type_name(task_type), **task_type._payload()}


def task_from_dict(data: Any) -> SyncTaskType:
    """Build a task type from its tagged mapping."""
    if not isinstance(data, Mapping):
        raise JsonError(f"expected an object, got {type(data).__name__}")
    tag = data.get("type")
    cls = _TASK_CLASSES.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise JsonError(f"unknown variant `{tag}`")
    return cls._load(data)


def task_to_json(task_type: SyncTaskType) -> str:
    """Encode a task type as JSON text."""
    return json.dumps(task_to_dict(task_type))


def task_from_json(text: str) -> SyncTaskType:
    """Decode a task type from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise JsonError(str(err)) from err
    return task_from_dict(data)


@dataclass
class SyncTask:
    """A queued unit of sync work."""

    profile_id: int
    task_type: SyncTaskType
    id: int | None = None
    status: TaskStatus = TaskStatus.PENDING
    attempts: int = 0
    last_error: str | None = None
    created_at: datetime | None = None
    next_retry_at: datetime | None = None
    completed_at: datetime | None = None