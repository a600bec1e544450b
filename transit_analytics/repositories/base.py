"""Repository interface consumed by the service and aggregation layers."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class LineRecord:
    """A persisted line."""

    id: uuid.UUID
    name: str
    created_at: datetime


@dataclass(frozen=True)
class StationRecord:
    """A persisted station together with the name of its line."""

    id: uuid.UUID
    name: str
    line_id: uuid.UUID
    line_name: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class IncidentRecord:
    """A persisted incident."""

    id: uuid.UUID
    station_id: uuid.UUID
    line_id: uuid.UUID
    occurred_at: datetime
    duration_minutes: int
    incident_type: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class IncidentDetail:
    """An incident joined with its line and station names."""

    id: uuid.UUID
    station_id: uuid.UUID
    line_id: uuid.UUID
    occurred_at: datetime
    duration_minutes: int
    incident_type: str
    status: str
    line_name: str
    station_name: str


@dataclass(frozen=True)
class BreakdownCount:
    """Number of incidents recorded against a named line or station."""

    name: str
    count: int


@dataclass(frozen=True)
class LineMTBF:
    """Mean time between failures for one line, in minutes."""

    line_name: str
    mtbf_minutes: float


@dataclass(frozen=True)
class StationPatch:
    """Partial station update; a field left as None is not touched."""

    name: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.status is None


class IncidentRepository(ABC):
    """Abstract store capability for lines, stations and incidents.

    Implementations must push same-key races into the store's atomic
    insert-on-conflict and report missing rows with `NotFoundError`, every
    other store failure with `StoreError`.
    """

    # Lines

    @abstractmethod
    async def create_line(self, name: str) -> LineRecord:
        """Insert a line, or update the existing one with the same name."""
        ...

    @abstractmethod
    async def get_or_create_line(self, name: str) -> LineRecord:
        """Return the line named `name`, creating it atomically if absent."""
        ...

    @abstractmethod
    async def list_lines(self) -> List[LineRecord]:
        ...

    @abstractmethod
    async def get_line(self, line_id: uuid.UUID) -> LineRecord:
        ...

    @abstractmethod
    async def update_line(self, line_id: uuid.UUID, name: str) -> LineRecord:
        ...

    @abstractmethod
    async def delete_line(self, line_id: uuid.UUID) -> None:
        ...

    # Stations

    @abstractmethod
    async def create_station(self, name: str, line_id: uuid.UUID, status: str) -> StationRecord:
        """Insert a station, or update the status of the existing (name, line) pair."""
        ...

    @abstractmethod
    async def get_or_create_station(self, name: str, line_id: uuid.UUID) -> StationRecord:
        """Return the station keyed by (name, line_id), creating it atomically if absent."""
        ...

    @abstractmethod
    async def list_stations(self, line_id: Optional[uuid.UUID] = None) -> List[StationRecord]:
        ...

    @abstractmethod
    async def get_station(self, station_id: uuid.UUID) -> StationRecord:
        ...

    @abstractmethod
    async def update_station(self, station_id: uuid.UUID, patch: StationPatch) -> StationRecord:
        ...

    @abstractmethod
    async def delete_station(self, station_id: uuid.UUID) -> None:
        ...

    # Incidents

    @abstractmethod
    async def create_incident(
        self,
        station_id: uuid.UUID,
        line_id: uuid.UUID,
        occurred_at: datetime,
        duration_minutes: int,
        incident_type: str,
    ) -> IncidentRecord:
        """Insert an incident, or update duration/type of the existing submission."""
        ...

    @abstractmethod
    async def get_incident(self, incident_id: uuid.UUID) -> IncidentDetail:
        ...

    # Aggregations

    @abstractmethod
    async def top_breakdowns_by_line(self, limit: int) -> List[BreakdownCount]:
        ...

    @abstractmethod
    async def top_breakdowns_by_station(self, limit: int) -> List[BreakdownCount]:
        ...

    @abstractmethod
    async def line_mtbf(self) -> List[LineMTBF]:
        ...

    @abstractmethod
    async def recent_disruptions(
        self,
        line_name: Optional[str],
        station_name: Optional[str],
        limit: int,
    ) -> List[IncidentDetail]:
        ...

    # Health

    @abstractmethod
    async def ping(self) -> None:
        """Raise `StoreError` when the store cannot be reached."""
        ...
