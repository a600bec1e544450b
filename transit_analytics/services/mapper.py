"""Convert repository records into response schemas."""

from __future__ import annotations

from typing import Iterable

from ..repositories.base import (
    BreakdownCount,
    IncidentDetail,
    IncidentRecord,
    LineMTBF,
    LineRecord,
    StationRecord,
)
from ..schemas import (
    IncidentResponse,
    LineListResponse,
    LineResponse,
    MTBFLineItem,
    MTBFResponse,
    RecentDisruptionItem,
    RecentDisruptionsResponse,
    StationListResponse,
    StationResponse,
    TopBreakdownItem,
    TopBreakdownsResponse,
)


def line_response(line: LineRecord) -> LineResponse:
    return LineResponse(id=str(line.id), name=line.name, created_at=line.created_at)


def line_list_response(lines: Iterable[LineRecord]) -> LineListResponse:
    return LineListResponse(lines=[line_response(line) for line in lines])


def station_response(station: StationRecord) -> StationResponse:
    return StationResponse(
        id=str(station.id),
        name=station.name,
        line_id=str(station.line_id),
        line_name=station.line_name,
        status=station.status,
        created_at=station.created_at,
    )


def station_list_response(stations: Iterable[StationRecord]) -> StationListResponse:
    return StationListResponse(stations=[station_response(station) for station in stations])


def incident_response(incident: IncidentRecord, line: LineRecord, station: StationRecord) -> IncidentResponse:
    """Response for a freshly ingested incident, echoing the resolved line and station."""
    return IncidentResponse(
        id=str(incident.id),
        line=line.name,
        station=station.name,
        line_id=str(line.id),
        station_id=str(station.id),
        timestamp=incident.occurred_at,
        duration_minutes=incident.duration_minutes,
        incident_type=incident.incident_type,
        status=incident.status,
    )


def incident_detail_response(incident: IncidentDetail) -> IncidentResponse:
    return IncidentResponse(
        id=str(incident.id),
        line=incident.line_name,
        station=incident.station_name,
        line_id=str(incident.line_id),
        station_id=str(incident.station_id),
        timestamp=incident.occurred_at,
        duration_minutes=incident.duration_minutes,
        incident_type=incident.incident_type,
        status=incident.status,
    )


def top_breakdowns_response(scope: str, breakdowns: Iterable[BreakdownCount]) -> TopBreakdownsResponse:
    return TopBreakdownsResponse(
        scope=scope,
        items=[TopBreakdownItem(name=item.name, count=item.count) for item in breakdowns],
    )


def mtbf_response(results: Iterable[LineMTBF]) -> MTBFResponse:
    return MTBFResponse(
        lines=[MTBFLineItem(name=item.line_name, mtbf_minutes=item.mtbf_minutes) for item in results]
    )


def recent_disruptions_response(incidents: Iterable[IncidentDetail]) -> RecentDisruptionsResponse:
    return RecentDisruptionsResponse(
        items=[
            RecentDisruptionItem(
                id=str(incident.id),
                line=incident.line_name,
                station=incident.station_name,
                timestamp=incident.occurred_at,
                duration_minutes=incident.duration_minutes,
                incident_type=incident.incident_type,
                status=incident.status,
            )
            for incident in incidents
        ]
    )
