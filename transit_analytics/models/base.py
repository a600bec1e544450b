"""Base database model with common functionality."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class UUIDPrimaryKeyMixin:
    """Mixin adding an opaque UUID primary key generated client-side."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )


def enum_check(column: str, enum_cls) -> str:
    """Render a CHECK expression restricting `column` to the values of `enum_cls`."""
    quoted = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({quoted})"
