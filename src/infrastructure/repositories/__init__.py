"""Repository implementations."""

from src.infrastructure.repositories.user_repository import UserRepository


__all__ = ["UserRepository"]
