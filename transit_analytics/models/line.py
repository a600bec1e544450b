"""Line model for transit lines."""

from typing import List, TYPE_CHECKING

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .incident import Incident
    from .station import Station

NAME_MAX_LENGTH = 100


class Line(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Represents a transit line; names are unique across the network."""

    __tablename__ = "lines"
    __table_args__ = (
        CheckConstraint(
            f"length(trim(name)) > 0 AND length(name) <= {NAME_MAX_LENGTH}",
            name="ck_lines_name_length",
        ),
    )

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), unique=True, nullable=False, index=True)

    # Relationships
    stations: Mapped[List["Station"]] = relationship(
        "Station",
        back_populates="line",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    incidents: Mapped[List["Incident"]] = relationship(
        "Incident",
        back_populates="line",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Line(id={self.id}, name={self.name})>"
