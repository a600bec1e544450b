"""API routes for incident analytics."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..errors import TransitAnalyticsError
from ..schemas import MTBFResponse, RecentDisruptionsResponse, TopBreakdownsResponse
from ..services.transit_service import TransitService
from .deps import get_service
from .errors import to_http_exception

router = APIRouter()


@router.get("/top_breakdowns", response_model=TopBreakdownsResponse)
async def get_top_breakdowns(
    scope: Optional[str] = Query(None, description="Group by 'line' or 'station'"),
    limit: Optional[int] = Query(None, description="Number of entries (default 5, max 100)"),
    service: TransitService = Depends(get_service),
):
    """Lines or stations with the most incidents."""
    try:
        return await service.get_top_breakdowns(scope, limit)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("/mean_time_between_failures", response_model=MTBFResponse)
async def get_mean_time_between_failures(service: TransitService = Depends(get_service)):
    """Mean minutes between consecutive incidents for every line with two or more incidents."""
    try:
        return await service.get_mtbf()
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc


@router.get("/recent_disruptions", response_model=RecentDisruptionsResponse)
async def get_recent_disruptions(
    line: Optional[str] = Query(None, description="Exact line name"),
    station: Optional[str] = Query(None, description="Exact station name"),
    limit: Optional[int] = Query(None, description="Number of incidents (default 20, max 100)"),
    service: TransitService = Depends(get_service),
):
    """Most recent incidents first."""
    try:
        return await service.get_recent_disruptions(line, station, limit)
    except TransitAnalyticsError as exc:
        raise to_http_exception(exc) from exc
