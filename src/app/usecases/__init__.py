"""Application use cases."""

from src.app.usecases.user_usecases import (
    DeleteUserUseCase,
    GetUserByLoginIdUseCase,
    GetUserUseCase,
    RegisterUserUseCase,
    UpdateUserUseCase,
)


__all__ = [
    "DeleteUserUseCase",
    "GetUserByLoginIdUseCase",
    "GetUserUseCase",
    "RegisterUserUseCase",
    "UpdateUserUseCase",
]
