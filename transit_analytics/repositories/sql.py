"""SQLAlchemy-backed repository: idempotent upserts and aggregation queries."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, List, Optional

from sqlalchemy import Float, Numeric, Select, cast, delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement

from ..database import create_session_factory, ping as ping_engine, session_scope
from ..errors import InvalidArgumentError, NotFoundError, StoreError
from ..models import Incident, Line, Station, StationStatus
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

logger = logging.getLogger(__name__)

MTBF_DECIMALS = 2


class minutes_between(FunctionElement):
    """SQL expression for the minutes elapsed between two timestamps (later, earlier)."""

    type = Float()
    name = "minutes_between"
    inherit_cache = True


@compiles(minutes_between)
def _minutes_between_epoch(element, compiler, **kw):
    later, earlier = list(element.clauses)
    return "(EXTRACT(EPOCH FROM (%s - %s)) / 60.0)" % (
        compiler.process(later, **kw),
        compiler.process(earlier, **kw),
    )


@compiles(minutes_between, "sqlite")
def _minutes_between_julianday(element, compiler, **kw):
    later, earlier = list(element.clauses)
    return "((julianday(%s) - julianday(%s)) * 1440.0)" % (
        compiler.process(later, **kw),
        compiler.process(earlier, **kw),
    )


def _as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


_LINE_COLUMNS = (Line.id, Line.name, Line.created_at)
_STATION_COLUMNS = (Station.id, Station.name, Station.line_id, Station.status, Station.created_at)
_INCIDENT_COLUMNS = (
    Incident.id,
    Incident.station_id,
    Incident.line_id,
    Incident.occurred_at,
    Incident.duration_minutes,
    Incident.incident_type,
    Incident.status,
    Incident.created_at,
)


def _line_record(row: Any) -> LineRecord:
    return LineRecord(id=row.id, name=row.name, created_at=_as_utc(row.created_at))


def _station_record(row: Any, line_name: str) -> StationRecord:
    return StationRecord(
        id=row.id,
        name=row.name,
        line_id=row.line_id,
        line_name=line_name,
        status=row.status,
        created_at=_as_utc(row.created_at),
    )


def _incident_record(row: Any) -> IncidentRecord:
    return IncidentRecord(
        id=row.id,
        station_id=row.station_id,
        line_id=row.line_id,
        occurred_at=_as_utc(row.occurred_at),
        duration_minutes=row.duration_minutes,
        incident_type=row.incident_type,
        status=row.status,
        created_at=_as_utc(row.created_at),
    )


def _incident_detail(row: Any) -> IncidentDetail:
    return IncidentDetail(
        id=row.id,
        station_id=row.station_id,
        line_id=row.line_id,
        occurred_at=_as_utc(row.occurred_at),
        duration_minutes=row.duration_minutes,
        incident_type=row.incident_type,
        status=row.status,
        line_name=row.line_name,
        station_name=row.station_name,
    )


class SqlIncidentRepository(IncidentRepository):
    """Repository over PostgreSQL or SQLite.

    Same-key writes rely exclusively on the store's atomic
    ``INSERT ... ON CONFLICT ... DO UPDATE ... RETURNING``; the repository
    holds no locks and keeps no copies of rows between calls.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._dialect = engine.dialect.name

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.debug("Store call failed", extra={"action": action}, exc_info=True)
            raise StoreError(f"database error while trying to {action}: {exc}") from exc

    def _insert(self, entity):
        if self._dialect == "postgresql":
            return pg_insert(entity)
        if self._dialect == "sqlite":
            return sqlite_insert(entity)
        raise StoreError(f"insert-on-conflict is not supported for dialect {self._dialect!r}")

    @staticmethod
    async def _require_line_name(session: AsyncSession, line_id: uuid.UUID) -> str:
        line_name = await session.scalar(select(Line.name).where(Line.id == line_id))
        if line_name is None:
            raise NotFoundError("line not found")
        return line_name

    @staticmethod
    def _station_query() -> Select:
        return select(*_STATION_COLUMNS, Line.name.label("line_name")).join(
            Line, Station.line_id == Line.id
        )

    @staticmethod
    def _incident_detail_query() -> Select:
        return (
            select(
                *_INCIDENT_COLUMNS,
                Line.name.label("line_name"),
                Station.name.label("station_name"),
            )
            .join(Line, Incident.line_id == Line.id)
            .join(Station, Incident.station_id == Station.id)
        )

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    async def create_line(self, name: str) -> LineRecord:
        async with self._session("create line") as session:
            stmt = self._insert(Line).values(name=name)
            stmt = stmt.on_conflict_do_update(
                index_elements=["name"],
                set_={"name": stmt.excluded.name, "updated_at": func.now()},
            ).returning(*_LINE_COLUMNS)
            row = (await session.execute(stmt)).one()
            return _line_record(row)

    async def get_or_create_line(self, name: str) -> LineRecord:
        async with self._session("get or create line") as session:
            stmt = self._insert(Line).values(name=name)
            # No-op update so that RETURNING yields the existing row on conflict
            stmt = stmt.on_conflict_do_update(
                index_elements=["name"],
                set_={"name": stmt.excluded.name},
            ).returning(*_LINE_COLUMNS)
            row = (await session.execute(stmt)).one()
            return _line_record(row)

    async def list_lines(self) -> List[LineRecord]:
        async with self._session("list lines") as session:
            result = await session.execute(select(*_LINE_COLUMNS).order_by(Line.name))
            return [_line_record(row) for row in result.all()]

    async def get_line(self, line_id: uuid.UUID) -> LineRecord:
        async with self._session("get line") as session:
            result = await session.execute(select(*_LINE_COLUMNS).where(Line.id == line_id))
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("line not found")
            return _line_record(row)

    async def update_line(self, line_id: uuid.UUID, name: str) -> LineRecord:
        async with self._session("update line") as session:
            stmt = (
                update(Line)
                .where(Line.id == line_id)
                .values(name=name, updated_at=func.now())
                .returning(*_LINE_COLUMNS)
            )
            result = await session.execute(stmt, execution_options={"synchronize_session": False})
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("line not found")
            return _line_record(row)

    async def delete_line(self, line_id: uuid.UUID) -> None:
        async with self._session("delete line") as session:
            result = await session.execute(
                delete(Line).where(Line.id == line_id),
                execution_options={"synchronize_session": False},
            )
            if result.rowcount == 0:
                raise NotFoundError("line not found")

    # ------------------------------------------------------------------
    # Stations
    # ------------------------------------------------------------------

    async def create_station(self, name: str, line_id: uuid.UUID, status: str) -> StationRecord:
        async with self._session("create station") as session:
            line_name = await self._require_line_name(session, line_id)
            stmt = self._insert(Station).values(
                name=name,
                line_id=line_id,
                status=status or StationStatus.ACTIVE.value,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["name", "line_id"],
                set_={"status": stmt.excluded.status, "updated_at": func.now()},
            ).returning(*_STATION_COLUMNS)
            row = (await session.execute(stmt)).one()
            return _station_record(row, line_name)

    async def get_or_create_station(self, name: str, line_id: uuid.UUID) -> StationRecord:
        async with self._session("get or create station") as session:
            line_name = await self._require_line_name(session, line_id)
            stmt = self._insert(Station).values(name=name, line_id=line_id)
            stmt = stmt.on_conflict_do_update(
                index_elements=["name", "line_id"],
                set_={"name": stmt.excluded.name},
            ).returning(*_STATION_COLUMNS)
            row = (await session.execute(stmt)).one()
            return _station_record(row, line_name)

    async def list_stations(self, line_id: Optional[uuid.UUID] = None) -> List[StationRecord]:
        async with self._session("list stations") as session:
            stmt = self._station_query()
            if line_id is not None:
                stmt = stmt.where(Station.line_id == line_id)
            stmt = stmt.order_by(Line.name, Station.name)
            result = await session.execute(stmt)
            return [_station_record(row, row.line_name) for row in result.all()]

    async def get_station(self, station_id: uuid.UUID) -> StationRecord:
        async with self._session("get station") as session:
            result = await session.execute(self._station_query().where(Station.id == station_id))
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("station not found")
            return _station_record(row, row.line_name)

    async def update_station(self, station_id: uuid.UUID, patch: StationPatch) -> StationRecord:
        async with self._session("update station") as session:
            query = self._station_query().where(Station.id == station_id).with_for_update(of=Station)
            current = (await session.execute(query)).one_or_none()
            if current is None:
                raise NotFoundError("station not found")

            stmt = (
                update(Station)
                .where(Station.id == station_id)
                .values(
                    name=patch.name if patch.name is not None else current.name,
                    status=patch.status if patch.status is not None else current.status,
                    updated_at=func.now(),
                )
                .returning(*_STATION_COLUMNS)
            )
            result = await session.execute(stmt, execution_options={"synchronize_session": False})
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("station not found")
            return _station_record(row, current.line_name)

    async def delete_station(self, station_id: uuid.UUID) -> None:
        async with self._session("delete station") as session:
            result = await session.execute(
                delete(Station).where(Station.id == station_id),
                execution_options={"synchronize_session": False},
            )
            if result.rowcount == 0:
                raise NotFoundError("station not found")

    # ------------------------------------------------------------------
    # Incidents
    # ------------------------------------------------------------------

    async def create_incident(
        self,
        station_id: uuid.UUID,
        line_id: uuid.UUID,
        occurred_at: datetime,
        duration_minutes: int,
        incident_type: str,
    ) -> IncidentRecord:
        async with self._session("create incident") as session:
            station_line_id = await session.scalar(select(Station.line_id).where(Station.id == station_id))
            if station_line_id is None:
                raise NotFoundError("station not found")
            if station_line_id != line_id:
                raise InvalidArgumentError("station does not belong to the given line")

            stmt = self._insert(Incident).values(
                station_id=station_id,
                line_id=line_id,
                occurred_at=_as_utc(occurred_at),
                duration_minutes=duration_minutes,
                incident_type=incident_type,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["station_id", "line_id", "occurred_at"],
                set_={
                    "duration_minutes": stmt.excluded.duration_minutes,
                    "incident_type": stmt.excluded.incident_type,
                    "updated_at": func.now(),
                },
            ).returning(*_INCIDENT_COLUMNS)
            row = (await session.execute(stmt)).one()
            return _incident_record(row)

    async def get_incident(self, incident_id: uuid.UUID) -> IncidentDetail:
        async with self._session("get incident") as session:
            result = await session.execute(self._incident_detail_query().where(Incident.id == incident_id))
            row = result.one_or_none()
            if row is None:
                raise NotFoundError("incident not found")
            return _incident_detail(row)

    # ------------------------------------------------------------------
    # Aggregations
    # ------------------------------------------------------------------

    async def _breakdowns(self, entity, name_column, join_condition, limit: int, action: str) -> List[BreakdownCount]:
        incident_count = func.count(Incident.id).label("incident_count")
        stmt = (
            select(name_column.label("name"), incident_count)
            .select_from(entity)
            .outerjoin(Incident, join_condition)
            .group_by(name_column)
            .order_by(incident_count.desc(), name_column.asc())
            .limit(limit)
        )
        async with self._session(action) as session:
            result = await session.execute(stmt)
            return [BreakdownCount(name=row.name, count=int(row.incident_count)) for row in result.all()]

    async def top_breakdowns_by_line(self, limit: int) -> List[BreakdownCount]:
        return await self._breakdowns(Line, Line.name, Incident.line_id == Line.id, limit, "count breakdowns by line")

    async def top_breakdowns_by_station(self, limit: int) -> List[BreakdownCount]:
        return await self._breakdowns(
            Station, Station.name, Incident.station_id == Station.id, limit, "count breakdowns by station"
        )

    async def line_mtbf(self) -> List[LineMTBF]:
        previous_at = func.lag(Incident.occurred_at).over(
            partition_by=Incident.line_id,
            order_by=Incident.occurred_at,
        )
        line_incidents = (
            select(
                Line.name.label("line_name"),
                Incident.occurred_at.label("occurred_at"),
                previous_at.label("previous_at"),
            )
            .select_from(Incident)
            .join(Line, Incident.line_id == Line.id)
            .subquery("line_incidents")
        )
        gap = minutes_between(line_incidents.c.occurred_at, line_incidents.c.previous_at)
        mtbf = cast(func.round(cast(func.avg(gap), Numeric), MTBF_DECIMALS), Float).label("mtbf_minutes")
        stmt = (
            select(line_incidents.c.line_name, mtbf)
            .where(line_incidents.c.previous_at.is_not(None))
            .group_by(line_incidents.c.line_name)
            .order_by(line_incidents.c.line_name)
        )
        async with self._session("calculate MTBF") as session:
            result = await session.execute(stmt)
            return [
                LineMTBF(line_name=row.line_name, mtbf_minutes=round(float(row.mtbf_minutes), MTBF_DECIMALS))
                for row in result.all()
            ]

    async def recent_disruptions(
        self,
        line_name: Optional[str],
        station_name: Optional[str],
        limit: int,
    ) -> List[IncidentDetail]:
        stmt = self._incident_detail_query()
        if line_name:
            stmt = stmt.where(Line.name == line_name)
        if station_name:
            stmt = stmt.where(Station.name == station_name)
        stmt = stmt.order_by(Incident.occurred_at.desc()).limit(limit)

        async with self._session("list recent disruptions") as session:
            result = await session.execute(stmt)
            return [_incident_detail(row) for row in result.all()]

    async def ping(self) -> None:
        try:
            await ping_engine(self._engine)
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"database is unreachable: {exc}") from exc
