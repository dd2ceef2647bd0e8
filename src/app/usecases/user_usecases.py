"""User use cases implementing business logic on top of the repository."""

from collections.abc import Callable

from src.domain.exceptions import EntityNotFoundError, MalformedIntentError
from src.domain.interfaces import IUserRepository
from src.domain.models.user import InsertUserIntent, UpdateUserIntent, User
from src.infrastructure.logging.config import get_logger
from src.infrastructure.persistence.unit_of_work import IUnitOfWork


logger = get_logger(__name__)


class GetUserUseCase:
    """Use case for getting an active user by surrogate key."""

    def __init__(self, user_repository: IUserRepository) -> None:
        self._repository = user_repository

    async def execute(self, idx: int) -> User:
        """Execute the use case.

        Args:
            idx: Surrogate key of the user to retrieve

        Returns:
            The user record

        Raises:
            EntityNotFoundError: If no active user has this key
        """
        user = await self._repository.find_by_idx(idx)
        if user is None:
            raise EntityNotFoundError(f"User with idx {idx} not found", details={"idx": idx})
        return user


class GetUserByLoginIdUseCase:
    """Use case for getting an active user by login name."""

    def __init__(self, user_repository: IUserRepository) -> None:
        self._repository = user_repository

    async def execute(self, id: str) -> User:
        """Execute the use case.

        Args:
            id: Login name of the user to retrieve (case-sensitive)

        Returns:
            The user record

        Raises:
            EntityNotFoundError: If no active user has this login name
        """
        user = await self._repository.find_by_id(id)
        if user is None:
            raise EntityNotFoundError(f"User with id {id} not found", details={"id": id})
        return user


class RegisterUserUseCase:
    """Use case for creating a new user."""

    def __init__(self, user_repository: IUserRepository) -> None:
        self._repository = user_repository

    async def execute(self, intent: InsertUserIntent) -> User:
        """Execute the use case.

        Args:
            intent: Login name, nickname and password hash

        Returns:
            The created user record

        Raises:
            DuplicateIdentifierError: If the login name is already taken
        """
        user = await self._repository.insert(intent)
        logger.info("user_registered", idx=user.idx)
        return user


class UpdateUserUseCase:
    """Use case for updating an existing, active user.

    The repository applies updates regardless of soft delete state, so this
    use case checks existence first inside the same transaction.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(self, idx: int, intent: UpdateUserIntent) -> User:
        """Execute the use case.

        Args:
            idx: Surrogate key of the user to update
            intent: Fields to change

        Returns:
            The user record after the update

        Raises:
            EntityNotFoundError: If no active user has this key
            MalformedIntentError: If the intent sets no field
            DuplicateIdentifierError: If the new login name is taken
        """
        if intent.is_empty:
            raise MalformedIntentError(
                f"Update of user {idx} sets no field", details={"idx": idx}
            )

        async with self._uow_factory() as uow:
            if await uow.users.find_by_idx(idx, uow.connection) is None:
                raise EntityNotFoundError(f"User with idx {idx} not found", details={"idx": idx})

            await uow.users.update_by_idx(idx, intent, uow.connection)
            updated = await uow.users.find_by_idx(idx, uow.connection)

        if updated is None:
            raise EntityNotFoundError(f"User with idx {idx} not found", details={"idx": idx})
        return updated


class DeleteUserUseCase:
    """Use case for soft deleting an active user."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def execute(self, idx: int) -> None:
        """Execute the use case.

        Args:
            idx: Surrogate key of the user to delete

        Raises:
            EntityNotFoundError: If no active user has this key
        """
        async with self._uow_factory() as uow:
            if await uow.users.find_by_idx(idx, uow.connection) is None:
                raise EntityNotFoundError(f"User with idx {idx} not found", details={"idx": idx})

            await uow.users.delete_by_idx(idx, uow.connection)

        logger.info("user_deleted", idx=idx)
