"""API routes for line management."""

from fastapi import APIRouter, Depends, status

from ..errors import TransitAnalyticsError
from ..schemas import LineCreate, LineListResponse, LineResponse, LineUpdate
from ..services.transit_service import TransitService
from .deps import get_service
from .errors import to_http_exception

router = APIRouter()


@router.post("", response_model=LineResponse, status_code=status.HTTP_201_CREATED)
async def create_line(payload: LineCreate, service: TransitService = Depends(get_service)):
    """
    Create a line.

    Creating a line whose name already exists returns the existing line.
    """
    try:
        return await service.create_line(payload.name)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("", response_model=LineListResponse)
async def list_lines(service: TransitService = Depends(get_service)):
    """List all lines ordered by name."""
    try:
        return await service.list_lines()
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("/{line_id}", response_model=LineResponse)
async def get_line(line_id: str, service: TransitService = Depends(get_service)):
    try:
        return await service.get_line(line_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.put("/{line_id}", response_model=LineResponse)
async def update_line(line_id: str, payload: LineUpdate, service: TransitService = Depends(get_service)):
    """Rename a line."""
    try:
        return await service.update_line(line_id, payload.name)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{line_id}")
async def delete_line(line_id: str, service: TransitService = Depends(get_service)):
    """Delete a line together with its stations and incidents."""
    try:
        await service.delete_line(line_id)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc
    return {}
