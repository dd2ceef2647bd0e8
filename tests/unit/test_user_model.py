"""Tests for the user table mapping, record and intents.

Test Organization:
- TestUserRowMapping: Table layout and the partial unique index
- TestUserRecord: Immutable record behavior
- TestInsertUserIntent: Insert intent validation
- TestUpdateUserIntent: Partial update field selection
"""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from pydantic import ValidationError

from src.domain.models.user import (
    UPDATE_FIELD_ORDER,
    InsertUserIntent,
    UpdateUserIntent,
    User,
    UserRow,
)
from tests.factories import user_factory
from tests.strategies import update_intent_strategy


# ============================================================================
# Table Mapping Tests
# ============================================================================


class TestUserRowMapping:
    """Test the user_tb mapping."""

    def test_table_name_and_columns(self) -> None:
        """Test user_tb exposes exactly the record columns."""
        table = UserRow.__table__

        assert table.name == "user_tb"
        assert set(table.columns.keys()) == {"idx", "id", "pw", "nickname", "created_at", "deleted_at"}

    def test_idx_is_autoincrement_primary_key(self) -> None:
        """Test idx is generated by storage."""
        idx = UserRow.__table__.c.idx

        assert idx.primary_key is True
        assert idx.autoincrement is True

    def test_only_deleted_at_is_nullable(self) -> None:
        """Test every column except deleted_at is required."""
        nullable = {column.name for column in UserRow.__table__.columns if column.nullable}

        assert nullable == {"deleted_at"}

    def test_id_unique_only_among_active_rows(self) -> None:
        """Test the unique index on id is partial on deleted_at IS NULL."""
        index = next(i for i in UserRow.__table__.indexes if i.name == "uq_user_tb_id_active")

        assert index.unique is True
        assert [column.name for column in index.columns] == ["id"]
        assert str(index.dialect_options["postgresql"]["where"]) == "deleted_at IS NULL"
        assert str(index.dialect_options["sqlite"]["where"]) == "deleted_at IS NULL"

    def test_repr_hides_password(self) -> None:
        """Test the row repr never includes the password hash."""
        row = UserRow(idx=1, id="alice", pw="hash1", nickname="Alice")

        assert "hash1" not in repr(row)
        assert "alice" in repr(row)


# ============================================================================
# Record Tests
# ============================================================================


class TestUserRecord:
    """Test the User record."""

    def test_is_immutable(self) -> None:
        """Test assigning to a field raises."""
        user = user_factory()

        with pytest.raises(ValidationError):
            user.nickname = "changed"  # type: ignore[misc]

    def test_repr_hides_password(self) -> None:
        """Test repr omits pw so records can be logged."""
        user = user_factory(pw="very-secret-hash")

        assert "very-secret-hash" not in repr(user)
        assert user.pw == "very-secret-hash"

    def test_is_deleted_follows_deleted_at(self) -> None:
        """Test is_deleted is True only when deleted_at is set."""
        assert user_factory().is_deleted is False
        assert user_factory(deleted_at=datetime(2024, 2, 1, tzinfo=UTC)).is_deleted is True

    def test_builds_from_row_mapping(self) -> None:
        """Test a record validates from a plain column mapping."""
        created = datetime(2024, 1, 1, tzinfo=UTC)

        user = User.model_validate(
            {
                "idx": 1,
                "id": "alice",
                "pw": "hash1",
                "nickname": "Alice",
                "created_at": created,
                "deleted_at": None,
            }
        )

        assert (user.idx, user.id, user.nickname, user.created_at) == (1, "alice", "Alice", created)

    def test_equal_records_compare_equal(self) -> None:
        """Test records with the same values are equal."""
        created = datetime(2024, 1, 1, tzinfo=UTC)

        first = user_factory(idx=1, id="alice", nickname="Alice", pw="hash1", created_at=created)
        second = user_factory(idx=1, id="alice", nickname="Alice", pw="hash1", created_at=created)

        assert first == second


# ============================================================================
# Insert Intent Tests
# ============================================================================


class TestInsertUserIntent:
    """Test InsertUserIntent validation."""

    def test_accepts_all_fields(self) -> None:
        """Test a complete intent validates."""
        intent = InsertUserIntent(id="alice", nickname="Alice", pw="hash1")

        assert (intent.id, intent.nickname, intent.pw) == ("alice", "Alice", "hash1")

    @pytest.mark.parametrize("missing", ["id", "nickname", "pw"])
    def test_rejects_missing_field(self, missing: str) -> None:
        """Test every field is required."""
        data = {"id": "alice", "nickname": "Alice", "pw": "hash1"}
        del data[missing]

        with pytest.raises(ValidationError):
            InsertUserIntent(**data)

    @pytest.mark.parametrize("empty", ["id", "nickname", "pw"])
    def test_rejects_empty_field(self, empty: str) -> None:
        """Test empty strings are rejected."""
        data = {"id": "alice", "nickname": "Alice", "pw": "hash1", empty: ""}

        with pytest.raises(ValidationError):
            InsertUserIntent(**data)

    def test_rejects_overlong_id(self) -> None:
        """Test ids longer than the column are rejected."""
        with pytest.raises(ValidationError):
            InsertUserIntent(id="a" * 101, nickname="Alice", pw="hash1")

    def test_repr_hides_password(self) -> None:
        """Test repr omits pw."""
        assert "hash1" not in repr(InsertUserIntent(id="alice", nickname="Alice", pw="hash1"))


# ============================================================================
# Update Intent Tests
# ============================================================================


class TestUpdateUserIntent:
    """Test UpdateUserIntent field selection."""

    def test_all_fields_default_to_none(self) -> None:
        """Test an intent with no arguments is empty."""
        intent = UpdateUserIntent()

        assert intent.is_empty is True
        assert intent.changes() == []

    def test_changes_follow_column_priority(self) -> None:
        """Test changes are ordered nickname, id, pw regardless of input order."""
        intent = UpdateUserIntent(pw="hash2", id="alicia", nickname="Alicia")

        assert intent.changes() == [("nickname", "Alicia"), ("id", "alicia"), ("pw", "hash2")]

    def test_empty_strings_mean_unchanged(self) -> None:
        """Test empty strings are treated like unset fields."""
        intent = UpdateUserIntent(id="", nickname="", pw="")

        assert intent.is_empty is True

    def test_single_field(self) -> None:
        """Test a nickname-only intent has exactly one change."""
        intent = UpdateUserIntent(nickname="Alicia")

        assert intent.is_empty is False
        assert intent.changes() == [("nickname", "Alicia")]

    @given(intent=update_intent_strategy())
    def test_changes_are_truthy_and_ordered(self, intent: UpdateUserIntent) -> None:
        """Test changes hold only truthy values in column priority order."""
        changes = intent.changes()
        columns = [column for column, _ in changes]

        assert all(value for _, value in changes)
        assert columns == [name for name in UPDATE_FIELD_ORDER if name in columns]
        assert intent.is_empty is (changes == [])
