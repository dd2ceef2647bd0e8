"""Tests for domain exceptions.

Test Organization:
- TestDomainException: Base exception behavior
- TestExceptionHierarchy: Subclass relationships and error codes
"""

import pytest

from src.domain.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    DuplicateIdentifierError,
    EntityNotFoundError,
    MalformedIntentError,
    ValidationError,
)


# ============================================================================
# Base Exception Tests
# ============================================================================


class TestDomainException:
    """Test DomainException base behavior."""

    def test_stores_message_and_details(self) -> None:
        """Test message and details are kept as attributes.

        Arrange: Message and details
        Act: Create exception
        Assert: Attributes and str() reflect the message
        """
        # Arrange & Act
        error = DomainException("Something failed", details={"idx": 1})

        # Assert
        assert error.message == "Something failed"
        assert error.details == {"idx": 1}
        assert str(error) == "Something failed"
        assert error.code == "DOMAIN_ERROR"

    def test_details_default_to_none(self) -> None:
        """Test details are optional."""
        assert DomainException("x").details is None


# ============================================================================
# Hierarchy Tests
# ============================================================================


class TestExceptionHierarchy:
    """Test exception subclasses and codes."""

    @pytest.mark.parametrize(
        ("exception_class", "parent", "code"),
        [
            (EntityNotFoundError, DomainException, "ENTITY_NOT_FOUND"),
            (ValidationError, DomainException, "VALIDATION_ERROR"),
            (MalformedIntentError, ValidationError, "MALFORMED_INTENT"),
            (BusinessRuleViolationError, DomainException, "BUSINESS_RULE_VIOLATION"),
            (DuplicateIdentifierError, BusinessRuleViolationError, "DUPLICATE_IDENTIFIER"),
        ],
    )
    def test_subclass_and_code(
        self, exception_class: type[DomainException], parent: type[DomainException], code: str
    ) -> None:
        """Test each exception extends its parent and carries its own code."""
        error = exception_class("message")

        assert isinstance(error, parent)
        assert isinstance(error, DomainException)
        assert error.code == code

    def test_duplicate_identifier_can_be_caught_as_business_rule(self) -> None:
        """Test callers catching the broader category also see duplicates."""
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            raise DuplicateIdentifierError("taken", details={"id": "alice"})

        assert exc_info.value.details == {"id": "alice"}
