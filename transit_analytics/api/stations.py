"""API routes for station management."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..errors import TransitAnalyticsError
from ..schemas import StationCreate, StationListResponse, StationResponse, StationUpdate
from ..services.transit_service import TransitService
from .deps import get_service
from .errors import to_http_exception

router = APIRouter()


@router.post("", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
async def create_station(payload: StationCreate, service: TransitService = Depends(get_service)):
    """
    Create a station on an existing line.

    If the line already has a station with this name, its status is updated
    and the existing station is returned.
    """
    try:
        return await service.create_station(payload.name, payload.line_id, payload.status)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("", response_model=StationListResponse)
async def list_stations(
    line_id: Optional[str] = Query(None, description="Only return stations of this line"),
    service: TransitService = Depends(get_service),
):
    """List stations ordered by line name, then station name."""
    try:
        return await service.list_stations(line_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{station_id}", response_model=StationResponse)
async def get_station(station_id: str, service: TransitService = Depends(get_service)):
    try:
        return await service.get_station(station_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{station_id}", response_model=StationResponse)
@router.put("/{station_id}", response_model=StationResponse)
async def update_station(
    station_id: str,
    payload: StationUpdate,
    service: TransitService = Depends(get_service),
):
    """Update the name and/or status of a station; omitted fields are kept."""
    try:
        return await service.update_station(station_id, payload.name, payload.status)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{station_id}")
async def delete_station(station_id: str, service: TransitService = Depends(get_service)):
    """Delete a station together with its incidents."""
    try:
        await service.delete_station(station_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc
    return {}
