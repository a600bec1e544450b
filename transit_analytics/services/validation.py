"""Input normalisation and validation performed before any store access."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..errors import InvalidArgumentError
from ..models import IncidentType, MAX_DURATION_MINUTES, NAME_MAX_LENGTH, StationStatus
from ..repositories.base import StationPatch

_INCIDENT_TYPES = tuple(member.value for member in IncidentType)
_STATION_STATUSES = tuple(member.value for member in StationStatus)


@dataclass(frozen=True)
class IncidentSubmission:
    """A validated incident report, names trimmed and time in UTC."""

    line: str
    station: str
    occurred_at: datetime
    duration_minutes: int
    incident_type: str


def validate_name(value: Optional[str], field: str = "name") -> str:
    """Trim `value` and enforce 1..100 characters."""
    name = (value or "").strip()
    if not name:
        raise InvalidArgumentError(f"{field} must not be empty")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidArgumentError(f"{field} must not exceed {NAME_MAX_LENGTH} characters")
    return name


def parse_uuid(value: Optional[str], entity: str) -> uuid.UUID:
    """Parse a canonical string id; malformed ids are invalid input, never 'not found'."""
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidArgumentError(f"invalid {entity} ID") from exc


def validate_station_status(value: Optional[str]) -> str:
    """Return a valid station status, defaulting to 'active' when unspecified."""
    status = (value or "").strip()
    if not status:
        return StationStatus.ACTIVE.value
    if status not in _STATION_STATUSES:
        raise InvalidArgumentError(f"status must be one of: {', '.join(_STATION_STATUSES)}")
    return status


def validate_duration(value: Optional[int]) -> int:
    if value is None or isinstance(value, bool) or not 0 <= value <= MAX_DURATION_MINUTES:
        raise InvalidArgumentError(f"duration_minutes must be between 0 and {MAX_DURATION_MINUTES}")
    return int(value)


def validate_incident_type(value: Optional[str]) -> str:
    if value not in _INCIDENT_TYPES:
        raise InvalidArgumentError(f"incident_type must be one of: {', '.join(_INCIDENT_TYPES)}")
    return value


def validate_timestamp(value: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """Normalise to UTC (naive values are taken as UTC) and reject future times."""
    if value is None:
        raise InvalidArgumentError("timestamp is required")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)

    now = now or datetime.now(timezone.utc)
    if value > now:
        raise InvalidArgumentError("timestamp cannot be in the future")
    return value


def validate_incident(
    line: Optional[str],
    station: Optional[str],
    timestamp: Optional[datetime],
    duration_minutes: Optional[int],
    incident_type: Optional[str],
    now: Optional[datetime] = None,
) -> IncidentSubmission:
    """Validate every field of an incident report, in the order they are reported."""
    return IncidentSubmission(
        line=validate_name(line, "line"),
        station=validate_name(station, "station"),
        occurred_at=validate_timestamp(timestamp, now=now),
        duration_minutes=validate_duration(duration_minutes),
        incident_type=validate_incident_type(incident_type),
    )


def validate_station_patch(name: Optional[str], status: Optional[str]) -> StationPatch:
    """Build a partial update; None means 'leave as is', an empty string is rejected."""
    patch = StationPatch(
        name=validate_name(name) if name is not None else None,
        status=_validate_present_status(status) if status is not None else None,
    )
    if patch.is_empty:
        raise InvalidArgumentError("at least one field (name or status) must be provided")
    return patch


def _validate_present_status(value: str) -> str:
    status = value.strip()
    if status not in _STATION_STATUSES:
        raise InvalidArgumentError(f"status must be one of: {', '.join(_STATION_STATUSES)}")
    return status
