"""Domain models."""

from src.domain.models.base import Base
from src.domain.models.user import InsertUserIntent, UpdateUserIntent, User, UserRow


__all__ = ["Base", "InsertUserIntent", "UpdateUserIntent", "User", "UserRow"]
