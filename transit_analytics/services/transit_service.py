"""Service facade implementing the line, station, incident and analytics operations."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Optional, Tuple, TypeVar

from ..config import Settings
from ..errors import StoreError
from ..repositories.base import IncidentRecord, IncidentRepository, LineRecord, StationRecord
from ..schemas import (
    IncidentResponse,
    LineListResponse,
    LineResponse,
    MTBFResponse,
    RecentDisruptionsResponse,
    StationListResponse,
    StationResponse,
    TopBreakdownsResponse,
)
from . import mapper
from .aggregation import AggregationEngine, parse_scope
from .validation import (
    IncidentSubmission,
    parse_uuid,
    validate_incident,
    validate_name,
    validate_station_patch,
    validate_station_status,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransitService:
    """Validates requests, drives the repository and maps results to responses.

    Validation happens before any store access. Missing rows surface as
    `NotFoundError`; every other store failure is logged and re-raised as a
    `StoreError` carrying a short reason. Each operation, including every
    store call it makes, is bounded by ``settings.request_timeout_seconds``.
    """

    def __init__(self, repository: IncidentRepository, settings: Settings):
        self._repository = repository
        self._settings = settings
        self._analytics = AggregationEngine(repository)

    async def _deadline(self, action: str, awaitable: Awaitable[T]) -> T:
        """Bound a whole operation by the request timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self._settings.request_timeout_seconds)
        except asyncio.TimeoutError as exc:
            logger.error(
                "Store call exceeded deadline",
                extra={"action": action, "timeout_seconds": self._settings.request_timeout_seconds},
            )
            raise StoreError(f"failed to {action}: deadline exceeded") from exc

    async def _step(self, action: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except StoreError as exc:
            logger.error("Failed to %s", action, extra={"error": str(exc)})
            raise StoreError(f"failed to {action}") from exc

    async def _call(self, action: str, awaitable: Awaitable[T]) -> T:
        return await self._deadline(action, self._step(action, awaitable))

    # Lines

    async def create_line(self, name: Optional[str]) -> LineResponse:
        name = validate_name(name)
        logger.info("Creating line", extra={"line_name": name})
        line = await self._call("create line", self._repository.create_line(name))
        logger.info("Line created successfully", extra={"line_id": str(line.id)})
        return mapper.line_response(line)

    async def list_lines(self) -> LineListResponse:
        lines = await self._call("list lines", self._repository.list_lines())
        return mapper.line_list_response(lines)

    async def get_line(self, line_id: Optional[str]) -> LineResponse:
        parsed = parse_uuid(line_id, "line")
        line = await self._call("get line", self._repository.get_line(parsed))
        return mapper.line_response(line)

    async def update_line(self, line_id: Optional[str], name: Optional[str]) -> LineResponse:
        parsed = parse_uuid(line_id, "line")
        name = validate_name(name)
        logger.info("Updating line", extra={"line_id": str(parsed), "line_name": name})
        line = await self._call("update line", self._repository.update_line(parsed, name))
        return mapper.line_response(line)

    async def delete_line(self, line_id: Optional[str]) -> None:
        parsed = parse_uuid(line_id, "line")
        logger.info("Deleting line", extra={"line_id": str(parsed)})
        await self._call("delete line", self._repository.delete_line(parsed))

    # Stations

    async def create_station(
        self,
        name: Optional[str],
        line_id: Optional[str],
        status: Optional[str] = None,
    ) -> StationResponse:
        name = validate_name(name)
        parsed_line_id = parse_uuid(line_id, "line")
        status = validate_station_status(status)
        logger.info(
            "Creating station",
            extra={"station_name": name, "line_id": str(parsed_line_id), "status": status},
        )
        station = await self._call(
            "create station",
            self._repository.create_station(name, parsed_line_id, status),
        )
        logger.info("Station created successfully", extra={"station_id": str(station.id)})
        return mapper.station_response(station)

    async def list_stations(self, line_id: Optional[str] = None) -> StationListResponse:
        parsed = parse_uuid(line_id, "line") if line_id else None
        stations = await self._call("list stations", self._repository.list_stations(parsed))
        return mapper.station_list_response(stations)

    async def get_station(self, station_id: Optional[str]) -> StationResponse:
        parsed = parse_uuid(station_id, "station")
        station = await self._call("get station", self._repository.get_station(parsed))
        return mapper.station_response(station)

    async def update_station(
        self,
        station_id: Optional[str],
        name: Optional[str] = None,
        status: Optional[str] = None,
    ) -> StationResponse:
        parsed = parse_uuid(station_id, "station")
        patch = validate_station_patch(name, status)
        logger.info("Updating station", extra={"station_id": str(parsed)})
        station = await self._call("update station", self._repository.update_station(parsed, patch))
        return mapper.station_response(station)

    async def delete_station(self, station_id: Optional[str]) -> None:
        parsed = parse_uuid(station_id, "station")
        logger.info("Deleting station", extra={"station_id": str(parsed)})
        await self._call("delete station", self._repository.delete_station(parsed))

    # Incidents

    async def create_incident(
        self,
        line: Optional[str],
        station: Optional[str],
        timestamp: Optional[datetime],
        duration_minutes: Optional[int],
        incident_type: Optional[str],
    ) -> IncidentResponse:
        """Record an incident, resolving line and station by name.

        Repeating the same (line, station, timestamp) updates duration and
        type of the existing incident instead of recording a second one.
        """
        submission = validate_incident(line, station, timestamp, duration_minutes, incident_type)
        logger.info(
            "Creating incident",
            extra={"line": submission.line, "station": submission.station},
        )

        line_record, station_record, incident = await self._deadline(
            "create incident",
            self._record_incident(submission),
        )

        logger.info("Incident created successfully", extra={"incident_id": str(incident.id)})
        return mapper.incident_response(incident, line_record, station_record)

    async def _record_incident(
        self, submission: IncidentSubmission
    ) -> Tuple[LineRecord, StationRecord, IncidentRecord]:
        line_record = await self._step(
            "process line",
            self._repository.get_or_create_line(submission.line),
        )
        station_record = await self._step(
            "process station",
            self._repository.get_or_create_station(submission.station, line_record.id),
        )
        incident = await self._step(
            "create incident",
            self._repository.create_incident(
                station_record.id,
                line_record.id,
                submission.occurred_at,
                submission.duration_minutes,
                submission.incident_type,
            ),
        )
        return line_record, station_record, incident

    async def get_incident(self, incident_id: Optional[str]) -> IncidentResponse:
        parsed = parse_uuid(incident_id, "incident")
        incident = await self._call("get incident", self._repository.get_incident(parsed))
        return mapper.incident_detail_response(incident)

    # Analytics

    async def get_top_breakdowns(self, scope: Optional[str], limit: Optional[int] = None) -> TopBreakdownsResponse:
        parsed_scope = parse_scope(scope)
        breakdowns = await self._call("get breakdowns", self._analytics.top_breakdowns(parsed_scope, limit))
        return mapper.top_breakdowns_response(parsed_scope.value, breakdowns)

    async def get_mtbf(self) -> MTBFResponse:
        results = await self._call("calculate MTBF", self._analytics.mtbf())
        return mapper.mtbf_response(results)

    async def get_recent_disruptions(
        self,
        line: Optional[str] = None,
        station: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> RecentDisruptionsResponse:
        incidents = await self._call(
            "get disruptions",
            self._analytics.recent_disruptions(line, station, limit),
        )
        return mapper.recent_disruptions_response(incidents)

    # Health

    async def check_ready(self) -> None:
        await self._call("reach the database", self._repository.ping())
