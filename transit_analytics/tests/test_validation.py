"""Tests for request validation."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from transit_analytics.errors import InvalidArgumentError
from transit_analytics.services.validation import (
    parse_uuid,
    validate_duration,
    validate_incident,
    validate_incident_type,
    validate_name,
    validate_station_patch,
    validate_station_status,
    validate_timestamp,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_name_is_trimmed():
    assert validate_name("  Circle Line  ") == "Circle Line"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_empty_name_rejected(value):
    with pytest.raises(InvalidArgumentError, match="name must not be empty"):
        validate_name(value)


def test_name_length_boundary():
    assert validate_name("x" * 100) == "x" * 100
    with pytest.raises(InvalidArgumentError, match="must not exceed 100 characters"):
        validate_name("x" * 101)


def test_name_error_uses_field_label():
    with pytest.raises(InvalidArgumentError, match="station must not be empty"):
        validate_name("", "station")


def test_parse_uuid():
    value = uuid.uuid4()
    assert parse_uuid(str(value), "line") == value
    assert parse_uuid(f" {value} ", "line") == value


@pytest.mark.parametrize("value", [None, "", "not-a-uuid", "1234"])
def test_parse_uuid_rejects_malformed_ids(value):
    with pytest.raises(InvalidArgumentError, match="invalid station ID"):
        parse_uuid(value, "station")


def test_station_status_defaults_to_active():
    assert validate_station_status(None) == "active"
    assert validate_station_status("") == "active"
    assert validate_station_status("maintenance") == "maintenance"


def test_unknown_station_status_rejected():
    with pytest.raises(InvalidArgumentError, match="status must be one of: active, inactive, maintenance, closed"):
        validate_station_status("broken")


@pytest.mark.parametrize("value", [0, 1, 1440])
def test_duration_accepts_bounds(value):
    assert validate_duration(value) == value


@pytest.mark.parametrize("value", [-1, 1441, None, True])
def test_duration_rejects_out_of_range(value):
    with pytest.raises(InvalidArgumentError, match="duration_minutes must be between 0 and 1440"):
        validate_duration(value)


@pytest.mark.parametrize("value", ["mechanical", "power", "signal", "weather", "other"])
def test_incident_types(value):
    assert validate_incident_type(value) == value


@pytest.mark.parametrize("value", [None, "", "Mechanical", "flood"])
def test_unknown_incident_type_rejected(value):
    with pytest.raises(InvalidArgumentError, match="incident_type must be one of"):
        validate_incident_type(value)


def test_timestamp_required():
    with pytest.raises(InvalidArgumentError, match="timestamp is required"):
        validate_timestamp(None, now=NOW)


def test_future_timestamp_rejected():
    with pytest.raises(InvalidArgumentError, match="timestamp cannot be in the future"):
        validate_timestamp(NOW + timedelta(seconds=1), now=NOW)


def test_timestamp_normalised_to_utc():
    plus_eight = timezone(timedelta(hours=8))
    local = datetime(2024, 6, 1, 16, 30, tzinfo=plus_eight)

    result = validate_timestamp(local, now=NOW)

    assert result == datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)
    assert result.tzinfo == timezone.utc


def test_naive_timestamp_taken_as_utc():
    result = validate_timestamp(datetime(2024, 6, 1, 11, 0), now=NOW)
    assert result == datetime(2024, 6, 1, 11, 0, tzinfo=timezone.utc)


def test_validate_incident():
    submission = validate_incident(
        " North South Line ",
        " Bishan ",
        NOW - timedelta(hours=1),
        15,
        "signal",
        now=NOW,
    )

    assert submission.line == "North South Line"
    assert submission.station == "Bishan"
    assert submission.occurred_at == NOW - timedelta(hours=1)
    assert submission.duration_minutes == 15
    assert submission.incident_type == "signal"


def test_validate_incident_reports_line_first():
    with pytest.raises(InvalidArgumentError, match="line must not be empty"):
        validate_incident("", "", None, -1, "bogus", now=NOW)


def test_station_patch_requires_a_field():
    with pytest.raises(InvalidArgumentError, match=r"at least one field \(name or status\) must be provided"):
        validate_station_patch(None, None)


def test_station_patch_partial():
    patch = validate_station_patch(None, "closed")
    assert patch.name is None
    assert patch.status == "closed"

    patch = validate_station_patch(" Bishan ", None)
    assert patch.name == "Bishan"
    assert patch.status is None


def test_station_patch_rejects_empty_values():
    with pytest.raises(InvalidArgumentError, match="name must not be empty"):
        validate_station_patch("", None)
    with pytest.raises(InvalidArgumentError, match="status must be one of"):
        validate_station_patch(None, "")
