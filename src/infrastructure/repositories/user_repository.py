"""User repository for database operations.

This module implements the ``user_tb`` queries with SQLAlchemy Core. Each
method runs exactly one statement, either on a connection handle supplied by
the caller (who then owns the transaction) or on a connection borrowed from
the repository's ``Database`` pool for that single statement.

Soft delete is encoded as an implicit ``deleted_at IS NULL`` filter on every
read; no read exposed here can see a deleted row.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import ColumnElement, Row, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from src.domain.exceptions import DuplicateIdentifierError
from src.domain.interfaces import IUserRepository, StatementExecutor
from src.domain.models.user import InsertUserIntent, UpdateUserIntent, User, UserRow
from src.infrastructure.logging.config import get_logger
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.statements import Assignments


logger = get_logger(__name__)

user_table = UserRow.__table__

# Columns of a full User record, in record field order
USER_COLUMNS = (
    user_table.c.idx,
    user_table.c.id,
    user_table.c.pw,
    user_table.c.nickname,
    user_table.c.created_at,
    user_table.c.deleted_at,
)


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an integrity error comes from a unique constraint.

    Recognizes the PostgreSQL ``unique_violation`` SQLSTATE (asyncpg) and the
    SQLite ``UNIQUE constraint failed`` message.

    Args:
        error: Error raised by SQLAlchemy

    Returns:
        True for unique violations, False for other integrity errors
    """
    orig = getattr(error, "orig", None)
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig if orig is not None else error).lower()
    return "unique" in message or "duplicate key" in message


def to_user(row: Row[Any]) -> User:
    """Map a result row selected with ``USER_COLUMNS`` to a ``User``."""
    return User.model_validate(dict(row._mapping))


class UserRepository(IUserRepository):
    """Repository for ``user_tb`` with caller-suppliable connection handles.

    The repository never begins, commits or rolls back a caller's
    transaction. To compose several calls atomically, open one handle and
    pass it to each call:

        ```python
        async with database.connection() as conn:
            user = await repo.insert(InsertUserIntent(...), conn)
            await repo.update_by_idx(user.idx, UpdateUserIntent(...), conn)
        ```

    Attributes:
        _database: Pool owner used when no handle is supplied
    """

    def __init__(self, database: Database) -> None:
        """Initialize user repository with its default pool.

        Args:
            database: Database manager owning the connection pool
        """
        self._database = database

    @asynccontextmanager
    async def _handle(
        self, conn: StatementExecutor | None
    ) -> AsyncGenerator[StatementExecutor]:
        """Yield the caller's handle, or a pooled one for a single statement."""
        if conn is not None:
            yield conn
            return
        async with self._database.connection() as pooled:
            yield pooled

    async def _find_one(
        self, criterion: ColumnElement[bool], conn: StatementExecutor | None
    ) -> User | None:
        query = select(*USER_COLUMNS).where(criterion).where(user_table.c.deleted_at.is_(None))

        async with self._handle(conn) as handle:
            result = await handle.execute(query)
            row = result.one_or_none()

        if row is None:
            logger.debug("user_lookup_miss", criterion=str(criterion))
            return None
        return to_user(row)

    async def find_by_idx(self, idx: int, conn: StatementExecutor | None = None) -> User | None:
        """Retrieve an active user by surrogate key.

        Args:
            idx: Surrogate primary key
            conn: Optional caller-owned connection handle

        Returns:
            User if an active row matches, None otherwise
        """
        return await self._find_one(user_table.c.idx == idx, conn)

    async def find_by_id(self, id: str, conn: StatementExecutor | None = None) -> User | None:
        """Retrieve an active user by login name (case-sensitive).

        Args:
            id: Login name
            conn: Optional caller-owned connection handle

        Returns:
            User if an active row matches, None otherwise
        """
        return await self._find_one(user_table.c.id == id, conn)

    async def insert(
        self, intent: InsertUserIntent, conn: StatementExecutor | None = None
    ) -> User:
        """Create a user and return the stored row in the same round trip.

        Args:
            intent: Login name, nickname and password hash
            conn: Optional caller-owned connection handle

        Returns:
            The created user with storage-generated ``idx`` and ``created_at``

        Raises:
            DuplicateIdentifierError: If an active user already has this id
        """
        statement = (
            insert(user_table)
            .values(id=intent.id, nickname=intent.nickname, pw=intent.pw)
            .returning(*USER_COLUMNS)
        )

        try:
            async with self._handle(conn) as handle:
                result = await handle.execute(statement)
                row = result.one()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise self._duplicate(intent.id) from e
            raise

        user = to_user(row)
        logger.debug("user_inserted", idx=user.idx, id=user.id)
        return user

    async def update_by_idx(
        self, idx: int, intent: UpdateUserIntent, conn: StatementExecutor | None = None
    ) -> None:
        """Apply the fields set on an intent to the row with this key.

        Only truthy intent fields are written. Soft-deleted rows are not
        excluded, and the affected row count is not reported.

        Args:
            idx: Surrogate primary key
            intent: Fields to change
            conn: Optional caller-owned connection handle

        Raises:
            MalformedIntentError: If the intent sets no field; raised before
                any handle is used
            DuplicateIdentifierError: If the new id is taken by an active user
        """
        assignments = Assignments(user_table, intent.changes())
        statement = assignments.render(user_table.c.idx == idx)

        try:
            async with self._handle(conn) as handle:
                await handle.execute(statement)
        except IntegrityError as e:
            if is_unique_violation(e):
                raise self._duplicate(intent.id) from e
            raise

        logger.debug("user_updated", idx=idx, columns=assignments.columns)

    async def delete_by_idx(self, idx: int, conn: StatementExecutor) -> None:
        """Soft delete the row with this key.

        Stamps ``deleted_at`` with the storage clock. Deleting an already
        deleted row re-stamps it with the newer time.

        Args:
            idx: Surrogate primary key
            conn: Caller-owned connection handle (required)
        """
        statement = update(user_table).where(user_table.c.idx == idx).values(deleted_at=func.now())
        await conn.execute(statement)
        logger.debug("user_soft_deleted", idx=idx)

    @staticmethod
    def _duplicate(id: str | None) -> DuplicateIdentifierError:
        """Build the error raised when storage rejects a taken login id."""
        logger.warning("duplicate_user_id", id=id)
        return DuplicateIdentifierError(
            f"User with id {id} already exists",
            details={"id": id},
        )
