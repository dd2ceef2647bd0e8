"""User table mapping, user record and write intents.

``UserRow`` declares the ``user_tb`` table. The repository reads and writes it
through SQLAlchemy Core statements and hands callers immutable ``User``
records, so no ORM identity map or lazy loading leaks out of the data layer.

Performance note:
    The natural ``id`` is unique only among active rows. A partial unique
    index on ``deleted_at IS NULL`` enforces that and doubles as the lookup
    index for ``find_by_id``; soft-deleted rows keep their old ``id`` without
    blocking its reuse.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.models.base import Base, SoftDeleteColumns


# Column priority for partial updates. Order only affects statement text.
UPDATE_FIELD_ORDER = ("nickname", "id", "pw")


class UserRow(SoftDeleteColumns, Base):
    """Table mapping for ``user_tb``.

    Attributes:
        idx: Surrogate primary key generated by storage
        id: Natural identifier (login name)
        pw: Password hash, opaque to this layer
        nickname: Display name
        created_at: Creation timestamp (storage clock)
        deleted_at: Soft delete timestamp (NULL if active)
    """

    __tablename__ = "user_tb"

    idx: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Surrogate primary key",
    )
    id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Login name, unique among active rows",
    )
    pw: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Password hash",
    )
    nickname: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name",
    )

    __table_args__ = (
        # PARTIAL UNIQUE INDEX: login names are unique among active rows only
        Index(
            "uq_user_tb_id_active",
            "id",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self) -> str:
        """Generate string representation without the password hash."""
        return f"<UserRow(idx={self.idx}, id={self.id})>"


class User(BaseModel):
    """Immutable snapshot of one ``user_tb`` row.

    Built from result rows by the repository. ``pw`` is excluded from
    ``repr`` so records can be logged or printed safely.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    idx: int = Field(..., description="Surrogate primary key")
    id: str = Field(..., description="Login name")
    pw: str = Field(..., repr=False, description="Password hash")
    nickname: str = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Creation timestamp")
    deleted_at: datetime | None = Field(None, description="Soft delete timestamp")

    @property
    def is_deleted(self) -> bool:
        """Check whether the row had been soft-deleted when it was read."""
        return self.deleted_at is not None


class InsertUserIntent(BaseModel):
    """Fields required to create a user. All three are mandatory."""

    id: str = Field(..., min_length=1, max_length=100, description="Login name")
    nickname: str = Field(..., min_length=1, max_length=100, description="Display name")
    pw: str = Field(..., min_length=1, max_length=255, repr=False, description="Password hash")


class UpdateUserIntent(BaseModel):
    """Fields a caller wants to change on an existing user.

    Every field is optional to support partial updates. Only truthy values
    are applied; ``None`` and the empty string both mean "leave unchanged".
    """

    id: str | None = Field(None, max_length=100, description="New login name")
    nickname: str | None = Field(None, max_length=100, description="New display name")
    pw: str | None = Field(None, max_length=255, repr=False, description="New password hash")

    def changes(self) -> list[tuple[str, str]]:
        """Return the fields to write as ordered ``(column, value)`` pairs.

        Returns:
            Pairs for every truthy field, in ``nickname``, ``id``, ``pw`` order
        """
        pairs = []
        for name in UPDATE_FIELD_ORDER:
            value = getattr(self, name)
            if value:
                pairs.append((name, value))
        return pairs

    @property
    def is_empty(self) -> bool:
        """Check whether the intent sets no field at all."""
        return not self.changes()
