"""Request and response schemas exchanged with API clients."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# Requests ---------------------------------------------------------------
# Fields are optional at the schema level so that missing values reach the
# validator and come back with a specific reason instead of a generic 422.


class LineCreate(BaseModel):
    """Schema for creating a line."""
    name: Optional[str] = None


class LineUpdate(BaseModel):
    """Schema for renaming a line."""
    name: Optional[str] = None


class StationCreate(BaseModel):
    """Schema for creating a station."""
    name: Optional[str] = None
    line_id: Optional[str] = None
    status: Optional[str] = Field(default=None, description="active, inactive, maintenance or closed")


class StationUpdate(BaseModel):
    """Schema for a partial station update; omitted fields keep their value."""
    name: Optional[str] = None
    status: Optional[str] = None


class IncidentCreate(BaseModel):
    """Schema for reporting an incident by line and station name."""
    line: Optional[str] = None
    station: Optional[str] = None
    timestamp: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    incident_type: Optional[str] = None


# Responses --------------------------------------------------------------


class LineResponse(BaseModel):
    id: str
    name: str
    created_at: datetime


class LineListResponse(BaseModel):
    lines: List[LineResponse]


class StationResponse(BaseModel):
    id: str
    name: str
    line_id: str
    line_name: str
    status: str
    created_at: datetime


class StationListResponse(BaseModel):
    stations: List[StationResponse]


class IncidentResponse(BaseModel):
    id: str
    line: str
    station: str
    line_id: str
    station_id: str
    timestamp: datetime
    duration_minutes: int
    incident_type: str
    status: str


class TopBreakdownItem(BaseModel):
    name: str
    count: int


class TopBreakdownsResponse(BaseModel):
    scope: str
    items: List[TopBreakdownItem]


class MTBFLineItem(BaseModel):
    name: str
    mtbf_minutes: float


class MTBFResponse(BaseModel):
    lines: List[MTBFLineItem]


class RecentDisruptionItem(BaseModel):
    id: str
    line: str
    station: str
    timestamp: datetime
    duration_minutes: int
    incident_type: str
    status: str


class RecentDisruptionsResponse(BaseModel):
    items: List[RecentDisruptionItem]
