"""Activity records as returned by the Garmin Connect API."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import InvalidResponseError


def _check_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise InvalidResponseError(f"expected an object, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None:
        raise InvalidResponseError(f"missing field `{key}`")
    return value


def _float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(f"field `{key}`: expected a number")
    return float(value)


def _int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidResponseError(f"field `{key}`: expected an integer")
    return value


def _str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidResponseError(f"field `{key}`: expected a string")
    return value


def _bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise InvalidResponseError(f"field `{key}`: expected a boolean")
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidResponseError(f"field `{key}`: expected a list")
    return value


def _required_int(data: Mapping[str, Any], key: str) -> int:
    _require(data, key)
    value = _int(data, key)
    assert value is not None
    return value


@dataclass
class ActivityType:
    """Kind of activity, such as running or cycling."""

    type_key: str
    type_id: int | None = None
    parent_type_id: int | None = None
    is_hidden: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ActivityType:
        data = _check_object(data)
        type_key = _require(data, "typeKey")
        if not isinstance(type_key, str):
            raise InvalidResponseError("field `typeKey`: expected a string")
        return cls(
            type_key=type_key,
            type_id=_int(data, "typeId"),
            parent_type_id=_int(data, "parentTypeId"),
            is_hidden=_bool(data, "isHidden"),
        )


def _activity_type(data: Mapping[str, Any]) -> ActivityType | None:
    value = data.get("activityType")
    return None if value is None else ActivityType.from_dict(value)


@dataclass
class ActivitySummary:
    """One entry of the activity list."""

    activity_id: int
    activity_name: str | None = None
    start_time_local: str | None = None
    start_time_gmt: str | None = None
    activity_type: ActivityType | None = None
    distance: float | None = None
    duration: float | None = None
    elapsed_duration: float | None = None
    moving_duration: float | None = None
    calories: float | None = None
    average_hr: float | None = None
    max_hr: float | None = None
    average_speed: float | None = None
    max_speed: float | None = None
    elevation_gain: float | None = None
    elevation_loss: float | None = None
    average_running_cadence_in_steps_per_minute: float | None = None
    steps: int | None = None
    has_polyline: bool | None = None
    owner_display_name: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ActivitySummary:
        data = _check_object(data)
        return cls(
            activity_id=_required_int(data, "activityId"),
            activity_name=_str(data, "activityName"),
            start_time_local=_str(data, "startTimeLocal"),
            start_time_gmt=_str(data, "startTimeGmt"),
            activity_type=_activity_type(data),
            distance=_float(data, "distance"),
            duration=_float(data, "duration"),
            elapsed_duration=_float(data, "elapsedDuration"),
            moving_duration=_float(data, "movingDuration"),
            calories=_float(data, "calories"),
            average_hr=_float(data, "averageHr"),
            max_hr=_float(data, "maxHr"),
            average_speed=_float(data, "averageSpeed"),
            max_speed=_float(data, "maxSpeed"),
            elevation_gain=_float(data, "elevationGain"),
            elevation_loss=_float(data, "elevationLoss"),
            average_running_cadence_in_steps_per_minute=_float(
                data, "averageRunningCadenceInStepsPerMinute"
            ),
            steps=_int(data, "steps"),
            has_polyline=_bool(data, "hasPolyline"),
            owner_display_name=_str(data, "ownerDisplayName"),
        )

    def display_name(self) -> str:
        """Return the activity name, or a placeholder when it has none."""
        return self.activity_name if self.activity_name is not None else "Unnamed Activity"

    def type_key(self) -> str:
        """Return the activity type key, or ``"unknown"``."""
        return self.activity_type.type_key if self.activity_type is not None else "unknown"

    def distance_km(self) -> float | None:
        """Return the distance in kilometres."""
        return None if self.distance is None else self.distance / 1000.0

    def duration_formatted(self) -> str:
        """Return the duration as H:MM:SS, or M:SS below one hour."""
        if self.duration is None:
            return "-"
        total = max(0, int(self.duration))
        hours, rest = divmod(total, 3600)
        minutes, seconds = divmod(rest, 60)
        if hours > 0:
            return f"{hours}:{minutes:02}:{seconds:02}"
        return f"{minutes}:{seconds:02}"

    def date(self) -> str:
        """Return the date part of the local start time."""
        if self.start_time_local is None:
            return "-"
        return re.split(r"[T ]", self.start_time_local, maxsplit=1)[0]


_DETAIL_KEYS = frozenset(
    {
        "activityId",
        "activityName",
        "description",
        "startTimeLocal",
        "startTimeGmt",
        "activityType",
        "summaryDto",
        "locationName",
        "timeZoneUnitDto",
        "metadataDto",
    }
)


@dataclass
class ActivityDetails:
    """Full activity details; unknown fields are kept in ``extra``."""

    activity_id: int
    activity_name: str | None = None
    description: str | None = None
    start_time_local: str | None = None
    start_time_gmt: str | None = None
    activity_type: ActivityType | None = None
    summary_dto: Any = None
    location_name: str | None = None
    time_zone_unit_dto: Any = None
    metadata_dto: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ActivityDetails:
        data = _check_object(data)
        return cls(
            activity_id=_required_int(data, "activityId"),
            activity_name=_str(data, "activityName"),
            description=_str(data, "description"),
            start_time_local=_str(data, "startTimeLocal"),
            start_time_gmt=_str(data, "startTimeGmt"),
            activity_type=_activity_type(data),
            summary_dto=data.get("summaryDto"),
            location_name=_str(data, "locationName"),
            time_zone_unit_dto=data.get("timeZoneUnitDto"),
            metadata_dto=data.get("metadataDto"),
            extra={k: v for k, v in data.items() if k not in _DETAIL_KEYS},
        )


@dataclass
class UploadUuid:
    """Identifier the server gives an upload."""

    uuid: str

    @classmethod
    def from_dict(cls, data: Any) -> UploadUuid:
        data = _check_object(data)
        value = _require(data, "uuid")
        if not isinstance(value, str):
            raise InvalidResponseError("field `uuid`: expected a string")
        return cls(uuid=value)


@dataclass
class UploadSuccess:
    """An activity created by an upload."""

    internal_id: int | None = None
    external_id: str | None = None
    messages: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> UploadSuccess:
        data = _check_object(data)
        return cls(
            internal_id=_int(data, "internalId"),
            external_id=_str(data, "externalId"),
            messages=list(_list(data, "messages")),
        )


@dataclass
class DetailedImportResult:
    """Outcome of importing an uploaded file."""

    upload_id: int
    upload_uuid: UploadUuid | None = None
    owner: int | None = None
    file_size: int | None = None
    processing_time: int | None = None
    creation_date: str | None = None
    file_name: str | None = None
    successes: list[UploadSuccess] = field(default_factory=list)
    failures: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> DetailedImportResult:
        data = _check_object(data)
        uuid = data.get("uploadUuid")
        return cls(
            upload_id=_required_int(data, "uploadId"),
            upload_uuid=None if uuid is None else UploadUuid.from_dict(uuid),
            owner=_int(data, "owner"),
            file_size=_int(data, "fileSize"),
            processing_time=_int(data, "processingTime"),
            creation_date=_str(data, "creationDate"),
            file_name=_str(data, "fileName"),
            successes=[UploadSuccess.from_dict(item) for item in _list(data, "successes")],
            failures=list(_list(data, "failures")),
        )


@dataclass
class UploadResult:
    """Response to an activity upload."""

    detailed_import_result: DetailedImportResult

    @classmethod
    def from_dict(cls, data: Any) -> UploadResult:
        data = _check_object(data)
        return cls(
            detailed_import_result=DetailedImportResult.from_dict(
                _require(data, "detailedImportResult")
            )
        )