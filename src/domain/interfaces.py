"""Repository interfaces defining data access contracts.

This module defines the contract between callers and the user data-access
layer, together with the minimal protocol a connection handle must satisfy.
These interfaces enable dependency inversion and facilitate testing with
mock implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from src.domain.models.user import InsertUserIntent, UpdateUserIntent, User


@runtime_checkable
class StatementExecutor(Protocol):
    """Anything that can execute a parameterized statement and return rows.

    Both ``sqlalchemy.ext.asyncio.AsyncConnection`` and ``AsyncSession``
    satisfy this protocol, so callers can pass either a bare connection in
    an open transaction or a session they manage themselves.
    """

    async def execute(self, statement: Any, parameters: Any = None) -> Any:
        """Execute a statement and return its result."""
        ...


class IUserRepository(ABC):
    """Data access contract for users with implicit soft delete filtering.

    Every method accepts an optional connection handle. When given, the
    statement runs on that handle and the caller owns the transaction; when
    omitted, the implementation uses its own pool. Reads never return rows
    whose ``deleted_at`` is set.
    """

    @abstractmethod
    async def find_by_idx(self, idx: int, conn: StatementExecutor | None = None) -> User | None:
        """Retrieve an active user by surrogate key.

        Args:
            idx: Surrogate primary key
            conn: Optional caller-owned connection handle

        Returns:
            User if an active row matches, None otherwise
        """

    @abstractmethod
    async def find_by_id(self, id: str, conn: StatementExecutor | None = None) -> User | None:
        """Retrieve an active user by login name.

        Args:
            id: Login name (case-sensitive)
            conn: Optional caller-owned connection handle

        Returns:
            User if an active row matches, None otherwise
        """

    @abstractmethod
    async def insert(
        self, intent: InsertUserIntent, conn: StatementExecutor | None = None
    ) -> User:
        """Create a user and return the stored row.

        Args:
            intent: Login name, nickname and password hash to store
            conn: Optional caller-owned connection handle

        Returns:
            The created user with storage-generated ``idx`` and ``created_at``

        Raises:
            DuplicateIdentifierError: If an active user already has this id
        """

    @abstractmethod
    async def update_by_idx(
        self, idx: int, intent: UpdateUserIntent, conn: StatementExecutor | None = None
    ) -> None:
        """Apply the fields set on an intent to the row with this key.

        Soft-deleted rows are not excluded and the number of affected rows is
        not reported; callers that care must look the row up first.

        Args:
            idx: Surrogate primary key
            intent: Fields to change
            conn: Optional caller-owned connection handle

        Raises:
            MalformedIntentError: If the intent sets no field
            DuplicateIdentifierError: If the new id is taken by an active user
        """

    @abstractmethod
    async def delete_by_idx(self, idx: int, conn: StatementExecutor) -> None:
        """Soft delete the row with this key by stamping ``deleted_at``.

        The handle is mandatory. Deleting an already deleted row re-stamps it.

        Args:
            idx: Surrogate primary key
            conn: Caller-owned connection handle
        """
