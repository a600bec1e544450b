"""API routes for incident reporting."""

from fastapi import APIRouter, Depends, status

from ..errors import TransitAnalyticsError
from ..schemas import IncidentCreate, IncidentResponse
from ..services.transit_service import TransitService
from .deps import get_service
from .errors import to_http_exception

router = APIRouter()


@router.post("", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
async def create_incident(payload: IncidentCreate, service: TransitService = Depends(get_service)):
    """
    Report an incident by line and station name.

    Unknown lines and stations are created on the fly. Reporting the same
    line, station and timestamp again updates the existing incident.
    """
    try:
        return await service.create_incident(
            payload.line,
            payload.station,
            payload.timestamp,
            payload.duration_minutes,
            payload.incident_type,
        )
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{incident_id}", response_model=IncidentResponse)
async def get_incident(incident_id: str, service: TransitService = Depends(get_service)):
    try:
        return await service.get_incident(incident_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc
