"""Database models for the transit incident analytics backend."""

from .base import Base
from .line import Line, NAME_MAX_LENGTH
from .station import Station, StationStatus
from .incident import Incident, IncidentStatus, IncidentType, MAX_DURATION_MINUTES

__all__ = [
    "Base",
    "Line",
    "Station",
    "StationStatus",
    "Incident",
    "IncidentStatus",
    "IncidentType",
    "NAME_MAX_LENGTH",
    "MAX_DURATION_MINUTES",
]
