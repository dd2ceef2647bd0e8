"""Unit of Work pattern for caller-owned transactions.

The repository never opens or closes transactions. A caller that needs
several repository calls to commit or roll back together opens a Unit of
Work and threads its connection through each call.

Key benefits:
- Single transaction boundary for business operations
- Automatic commit/rollback handling
- Prevents partial updates from failures
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncTransaction

from src.domain.interfaces import IUserRepository
from src.infrastructure.persistence.database import Database
from src.infrastructure.repositories.user_repository import UserRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface.

    Exposes the shared connection handle and the repositories that should
    be called with it.
    """

    connection: AsyncConnection
    """Handle to pass to every repository call inside this transaction"""

    users: IUserRepository
    """User repository"""

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit the context manager."""
        ...


class UnitOfWork:
    """SQLAlchemy implementation of Unit of Work pattern.

    Opens one pooled connection and one transaction on enter. Commits on
    success or rolls back on error, then returns the connection to the pool.

    Example:
        ```python
        async with UnitOfWork(database) as uow:
            user = await uow.users.find_by_idx(idx, uow.connection)
            await uow.users.update_by_idx(idx, intent, uow.connection)
            await uow.users.delete_by_idx(other_idx, uow.connection)
        ```
    """

    def __init__(self, database: Database, users: IUserRepository | None = None) -> None:
        """Initialize Unit of Work.

        Args:
            database: Database manager providing the connection
            users: Optional repository to expose (defaults to a UserRepository
                over the same database)
        """
        self._database = database
        self.users = users if users is not None else UserRepository(database)
        self._connection: AsyncConnection | None = None
        self._transaction: AsyncTransaction | None = None

    @property
    def connection(self) -> AsyncConnection:
        """Connection handle of the open transaction.

        Raises:
            RuntimeError: If accessed outside of the context manager
        """
        if self._connection is None:
            raise RuntimeError("Unit of work is not active")
        return self._connection

    async def __aenter__(self) -> "UnitOfWork":
        """Enter context: borrow a connection and begin a transaction.

        Returns:
            Self with an open connection
        """
        self._connection = await self._database.get_engine().connect()
        self._transaction = await self._connection.begin()
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit context: commit or rollback based on exceptions.

        Args:
            exc_type: Exception type if an error occurred
            exc_val: Exception value if an error occurred
            exc_tb: Exception traceback if an error occurred
        """
        if self._connection is None:
            return

        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self._connection.close()
            self._connection = None
            self._transaction = None

    async def commit(self) -> None:
        """Commit all changes in the current transaction.

        Raises:
            RuntimeError: If called outside of context manager
        """
        if self._transaction is None:
            raise RuntimeError("Cannot commit: transaction not started")
        if self._transaction.is_active:
            await self._transaction.commit()

    async def rollback(self) -> None:
        """Rollback all changes in the current transaction.

        Raises:
            RuntimeError: If called outside of context manager
        """
        if self._transaction is None:
            raise RuntimeError("Cannot rollback: transaction not started")
        if self._transaction.is_active:
            await self._transaction.rollback()


@asynccontextmanager
async def get_unit_of_work(database: Database) -> AsyncGenerator[UnitOfWork]:
    """Get Unit of Work instance as context manager.

    Args:
        database: Database manager

    Yields:
        Unit of Work instance
    """
    async with UnitOfWork(database) as uow:
        yield uow
