"""Dependency injection container configuration."""

from typing import Any

from dependency_injector import containers, providers

from src.app.usecases.user_usecases import (
    DeleteUserUseCase,
    GetUserByLoginIdUseCase,
    GetUserUseCase,
    RegisterUserUseCase,
    UpdateUserUseCase,
)
from src.domain.interfaces import IUserRepository
from src.infrastructure.config import get_settings
from src.infrastructure.logging.config import configure_logging
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.unit_of_work import UnitOfWork
from src.infrastructure.repositories.user_repository import UserRepository


class UseCases(containers.DeclarativeContainer):
    """Use cases container for better organization."""

    user_repository: providers.Dependency[IUserRepository] = providers.Dependency()
    uow_factory: providers.Dependency[Any] = providers.Dependency()

    get_user = providers.Factory(GetUserUseCase, user_repository=user_repository)
    get_user_by_login_id = providers.Factory(
        GetUserByLoginIdUseCase, user_repository=user_repository
    )
    register_user = providers.Factory(RegisterUserUseCase, user_repository=user_repository)
    update_user = providers.Factory(UpdateUserUseCase, uow_factory=uow_factory)
    delete_user = providers.Factory(DeleteUserUseCase, uow_factory=uow_factory)


class Container(containers.DeclarativeContainer):
    """Application dependency injection container.

    The ``database`` singleton owns the connection pool. Callers dispose it
    at shutdown with ``await container.database().close()``. Logging is a
    resource set up by ``container.init_resources()`` at startup.
    """

    # Configuration
    config = providers.Singleton(get_settings)

    # Infrastructure
    logging = providers.Resource(configure_logging, settings=config)
    database = providers.Singleton(Database, settings=config)

    # Repositories
    user_repository = providers.Singleton(UserRepository, database=database)

    # Unit of Work factory for transactional operations
    uow_factory = providers.Factory(
        UnitOfWork,
        database=database,
        users=user_repository,
    )

    # Use Cases (nested container)
    use_cases = providers.Container(
        UseCases,
        user_repository=user_repository,
        uow_factory=uow_factory.provider,
    )
