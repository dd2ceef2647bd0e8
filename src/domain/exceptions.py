"""Domain-specific exceptions for user data-access errors.

This module defines the exception hierarchy raised by the repository and the
use cases built on top of it. Lookups never raise for a missing row; they
return ``None`` and leave it to callers to raise ``EntityNotFoundError``.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain-related errors.

    Provides a consistent interface for domain exceptions with error codes
    and optional contextual details.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error context (dict or list)
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | list[Any] | None = None) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error description
            details: Optional additional context about the error
        """
        self.message = message
        self.details = details
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when a caller requires an entity that does not exist.

    The repository itself returns ``None`` for absent rows; use cases that
    need the row to exist translate that absence into this error.
    """

    code = "ENTITY_NOT_FOUND"


class ValidationError(DomainException):
    """Raised when input data fails business validation rules."""

    code = "VALIDATION_ERROR"


class MalformedIntentError(ValidationError):
    """Raised when a write intent carries nothing to write.

    An update intent with no settable field would render a statement with an
    empty SET clause, so it is rejected before any statement is built.
    """

    code = "MALFORMED_INTENT"


class BusinessRuleViolationError(DomainException):
    """Raised when an operation violates business rules."""

    code = "BUSINESS_RULE_VIOLATION"


class DuplicateIdentifierError(BusinessRuleViolationError):
    """Raised when storage rejects a write because the login id is taken.

    The original ``sqlalchemy.exc.IntegrityError`` is chained as
    ``__cause__``; ``details`` carries the conflicting ``id``.
    """

    code = "DUPLICATE_IDENTIFIER"
