"""Aggregation engine: limit and scope policy over the repository's analytics queries."""

from __future__ import annotations

import enum
import logging
from typing import List, Optional

from ..errors import InvalidArgumentError
from ..repositories.base import BreakdownCount, IncidentDetail, IncidentRepository, LineMTBF

logger = logging.getLogger(__name__)

MAX_LIMIT = 100
DEFAULT_BREAKDOWN_LIMIT = 5
DEFAULT_DISRUPTION_LIMIT = 20


class BreakdownScope(str, enum.Enum):
    """Dimension used to group breakdown counts."""

    LINE = "line"
    STATION = "station"


def clamp_limit(requested: Optional[int], default: int) -> int:
    """Bound a caller-supplied limit to [1, MAX_LIMIT]; non-positive or missing means `default`."""
    if requested is None or requested <= 0:
        return default
    return min(requested, MAX_LIMIT)


def parse_scope(value: Optional[str]) -> BreakdownScope:
    try:
        return BreakdownScope((value or "").strip().lower())
    except ValueError as exc:
        raise InvalidArgumentError("scope must be 'line' or 'station'") from exc


def _filter_value(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AggregationEngine:
    """Read-only analytics over the incident repository.

    Calls are side-effect free and are not retried here; a failing store call
    propagates and no partial result is returned.
    """

    def __init__(self, repository: IncidentRepository):
        self._repository = repository

    async def top_breakdowns(self, scope: BreakdownScope, limit: Optional[int] = None) -> List[BreakdownCount]:
        """Incident counts per line or station name, highest first, zero counts included."""
        limit = clamp_limit(limit, DEFAULT_BREAKDOWN_LIMIT)
        logger.info("Getting top breakdowns", extra={"scope": scope.value, "limit": limit})
        if scope is BreakdownScope.LINE:
            return await self._repository.top_breakdowns_by_line(limit)
        return await self._repository.top_breakdowns_by_station(limit)

    async def mtbf(self) -> List[LineMTBF]:
        """Mean minutes between consecutive incidents, per line with at least two incidents."""
        logger.info("Calculating MTBF for all lines")
        return await self._repository.line_mtbf()

    async def recent_disruptions(
        self,
        line: Optional[str] = None,
        station: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[IncidentDetail]:
        """Most recent incidents first, optionally filtered by exact line and/or station name."""
        limit = clamp_limit(limit, DEFAULT_DISRUPTION_LIMIT)
        line_name = _filter_value(line)
        station_name = _filter_value(station)
        logger.info(
            "Getting recent disruptions",
            extra={"line": line_name, "station": station_name, "limit": limit},
        )
        return await self._repository.recent_disruptions(line_name, station_name, limit)
