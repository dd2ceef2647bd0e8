"""Declarative base and soft delete columns shared by table mappings."""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy table mappings."""


class SoftDeleteColumns:
    """Mixin adding storage-stamped creation and soft delete timestamps.

    Both timestamps come from the database clock (``now()``), never from the
    application process, so rows written by different hosts stay comparable.
    A row whose ``deleted_at`` is set is logically absent.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp of row creation (storage clock)",
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="Soft delete timestamp (NULL if active)",
    )
