"""Persistence layer for lines, stations and incidents."""

from .base import (
    BreakdownCount,
    IncidentDetail,
    IncidentRecord,
    IncidentRepository,
    LineMTBF,
    LineRecord,
    StationPatch,
    StationRecord,
)
from .sql import SqlIncidentRepository

__all__ = [
    "BreakdownCount",
    "IncidentDetail",
    "IncidentRecord",
    "IncidentRepository",
    "LineMTBF",
    "LineRecord",
    "StationPatch",
    "StationRecord",
    "SqlIncidentRepository",
]
