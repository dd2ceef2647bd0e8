"""Statement builders for partial writes.

``Assignments`` collects the ``column = value`` pairs of an UPDATE one at a
time and renders them into a single SQLAlchemy ``Update``. Every value is
sent as its own bound parameter; nothing is spliced into the SQL text.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from sqlalchemy import ColumnElement, Table, Update, update

from src.domain.exceptions import MalformedIntentError


class Assignments:
    """Ordered ``(column, value)`` pairs for the SET clause of an UPDATE.

    Example:
        ```python
        stmt = (
            Assignments(user_table)
            .add("nickname", "Alicia")
            .render(user_table.c.idx == 1)
        )
        # UPDATE user_tb SET nickname=:nickname WHERE user_tb.idx = :idx_1
        ```
    """

    def __init__(self, table: Table, pairs: Iterable[tuple[str, Any]] = ()) -> None:
        """Initialize the builder for one table.

        Args:
            table: Table the UPDATE targets
            pairs: Optional initial ``(column, value)`` pairs
        """
        self._table = table
        self._pairs: list[tuple[str, Any]] = []
        for column, value in pairs:
            self.add(column, value)

    def add(self, column: str, value: Any) -> "Assignments":
        """Append one assignment.

        Args:
            column: Column name on the target table
            value: Value to bind

        Returns:
            Self, for chaining

        Raises:
            KeyError: If the table has no such column
            ValueError: If the column was already assigned
        """
        if column not in self._table.c:
            raise KeyError(f"Table {self._table.name} has no column {column!r}")
        if column in self.columns:
            raise ValueError(f"Column {column!r} is already assigned")
        self._pairs.append((column, value))
        return self

    @property
    def columns(self) -> list[str]:
        """Assigned column names in insertion order."""
        return [column for column, _ in self._pairs]

    @property
    def parameters(self) -> dict[str, Any]:
        """Assigned values keyed by column name, in insertion order."""
        return dict(self._pairs)

    def render(self, *where: ColumnElement[bool]) -> Update:
        """Build the UPDATE statement.

        Args:
            *where: Criteria for the WHERE clause

        Returns:
            Update statement setting exactly the assigned columns

        Raises:
            MalformedIntentError: If nothing was assigned
        """
        if not self._pairs:
            raise MalformedIntentError(
                f"Update on {self._table.name} has no columns to set",
                details={"table": self._table.name},
            )
        values = {self._table.c[column]: value for column, value in self._pairs}
        return update(self._table).where(*where).values(values)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._pairs)
