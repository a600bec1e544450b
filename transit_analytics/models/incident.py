"""Incident model for breakdowns reported against a station."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_check

if TYPE_CHECKING:
    from .line import Line
    from .station import Station

MAX_DURATION_MINUTES = 1440


class IncidentType(str, enum.Enum):
    """Root-cause category of an incident."""

    MECHANICAL = "mechanical"
    POWER = "power"
    SIGNAL = "signal"
    WEATHER = "weather"
    OTHER = "other"


class IncidentStatus(str, enum.Enum):
    """Handling state of an incident."""

    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Incident(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An incident; (station_id, line_id, occurred_at) identifies a submission."""

    __tablename__ = "incidents"
    __table_args__ = (
        UniqueConstraint("station_id", "line_id", "occurred_at", name="uq_incidents_station_line_time"),
        CheckConstraint(
            f"duration_minutes >= 0 AND duration_minutes <= {MAX_DURATION_MINUTES}",
            name="ck_incidents_duration",
        ),
        CheckConstraint(enum_check("incident_type", IncidentType), name="ck_incidents_type"),
        CheckConstraint(enum_check("status", IncidentStatus), name="ck_incidents_status"),
        Index("ix_incidents_line_time", "line_id", "occurred_at"),
        Index("ix_incidents_station_time", "station_id", "occurred_at"),
    )

    station_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("stations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Denormalized from the station for aggregation queries
    line_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    incident_type: Mapped[str] = mapped_column(String(20), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=IncidentStatus.OPEN.value,
        server_default=IncidentStatus.OPEN.value,
        index=True,
    )

    # Relationships
    line: Mapped["Line"] = relationship("Line", back_populates="incidents")
    station: Mapped["Station"] = relationship("Station", back_populates="incidents")

    def __repr__(self) -> str:
        return (
            f"<Incident(id={self.id}, station_id={self.station_id}, "
            f"type={self.incident_type}, at={self.occurred_at})>"
        )
