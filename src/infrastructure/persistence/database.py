"""Database connection and session management.

This module provides async SQLAlchemy database connectivity with connection
pooling, connection and session lifecycle management, and health check
capabilities. The ``Database`` instance is the pool owner: it is created by
the caller at startup and closed at shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.domain.models import Base
from src.infrastructure.config import Settings


class Database:
    """Database connection manager with async SQLAlchemy support.

    Handles database engine creation, connection pooling, session factory
    management, and provides transactional connection and session context
    managers.

    Connection Pool Configuration:
        - pool_size: Base number of persistent connections
        - max_overflow: Additional connections during traffic spikes
        - pool_timeout: Seconds to wait for a free connection
        - pool_pre_ping: Validates connections before use (prevents stale connections)

        SQLite URLs skip the sizing arguments; the driver manages its own
        connections.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize database manager with application settings.

        Args:
            settings: Application configuration containing database connection details
        """
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    def get_engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Lazily initializes the engine on first access with configured
        connection pool settings.

        Returns:
            Async SQLAlchemy engine instance
        """
        if self._engine is None:
            options: dict[str, Any] = {
                "echo": self.settings.database_echo,
                "pool_pre_ping": True,
            }
            if not self.settings.is_sqlite:
                options.update(
                    pool_size=self.settings.database_pool_size,
                    max_overflow=self.settings.database_max_overflow,
                    pool_timeout=self.settings.database_pool_timeout,
                )
            self._engine = create_async_engine(self.settings.database_url, **options)
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Configures sessions with:
        - expire_on_commit=False: Allows access to objects after commit
        - autoflush=False: Requires explicit flush for database writes

        Returns:
            Session factory for creating database sessions
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.get_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[AsyncConnection]:
        """Borrow a pooled connection inside its own transaction.

        Usage:
            async with database.connection() as conn:
                result = await conn.execute(statement)
                # Commit on success, rollback on exception

        Yields:
            Connection with an open transaction
        """
        async with self.get_engine().begin() as conn:
            yield conn

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Provide a transactional database session with automatic commit/rollback.

        Yields:
            Active database session

        Raises:
            Exception: Re-raises any exception after rolling back transaction
        """
        session_factory = self.get_session_factory()
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create all mapped tables that do not exist yet.

        Intended for tests and local bootstrapping; it never alters existing
        tables.
        """
        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close all database connections and dispose of the engine.

        Should be called during application shutdown to ensure clean
        resource cleanup and prevent connection leaks. Safe to call twice.
        """
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def health_check(self) -> bool:
        """Verify database connectivity with a simple query.

        Returns:
            True if database is accessible, False on any error
        """
        try:
            async with self.connection() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False
