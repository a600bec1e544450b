"""Station model; a station belongs to exactly one line."""

import enum
import uuid
from typing import List, TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_check
from .line import NAME_MAX_LENGTH

if TYPE_CHECKING:
    from .incident import Incident
    from .line import Line


class StationStatus(str, enum.Enum):
    """Operational status of a station."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    CLOSED = "closed"


class Station(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Represents a station on a line; (name, line_id) is unique."""

    __tablename__ = "stations"
    __table_args__ = (
        UniqueConstraint("name", "line_id", name="uq_stations_name_line"),
        CheckConstraint(
            f"length(trim(name)) > 0 AND length(name) <= {NAME_MAX_LENGTH}",
            name="ck_stations_name_length",
        ),
        CheckConstraint(enum_check("status", StationStatus), name="ck_stations_status"),
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    line_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StationStatus.ACTIVE.value,
        server_default=StationStatus.ACTIVE.value,
        index=True,
    )

    # Relationships
    line: Mapped["Line"] = relationship("Line", back_populates="stations")

    incidents: Mapped[List["Incident"]] = relationship(
        "Incident",
        back_populates="station",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Station(id={self.id}, name={self.name}, line_id={self.line_id}, status={self.status})>"
