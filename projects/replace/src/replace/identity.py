"""Strategies for targeting a scanned row with an UPDATE."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import and_

from replace.errors import UntargetableRowError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, RowMapping

    from replace.config import IdentityName
    from replace.inspection import Table


class RowIdentity(Protocol):
    """Builds the WHERE clause that matches a scanned row."""

    def predicate(self, table: Table, row: RowMapping) -> ColumnElement[bool]:
        """Return the condition matching the row's original values."""
        ...


class FullRowIdentity:
    """Match a row by equality on every column whose original value is not NULL.

    This is best effort. Rows that are identical across their non-null columns
    are all matched by the same UPDATE, and a concurrent writer can change the
    row between the scan and the update.
    """

    def predicate(self, table: Table, row: RowMapping) -> ColumnElement[bool]:
        """Return the AND of `column = value` over the row's non-null values."""
        conditions = [
            table.clause.c[name] == value
            for name, value in row.items()
            if value is not None
        ]
        if not conditions:
            msg = f"no valid WHERE clauses found for a row in table {table.name}"
            raise UntargetableRowError(msg)
        return and_(*conditions)


class PrimaryKeyIdentity:
    """Match a row on its primary key, falling back when there is none."""

    def __init__(self, fallback: RowIdentity | None = None) -> None:
        """Initialize with the strategy used for tables without a usable key."""
        self._fallback = fallback or FullRowIdentity()

    def predicate(self, table: Table, row: RowMapping) -> ColumnElement[bool]:
        """Return equality on the primary key, or the fallback predicate."""
        keys = table.primary_keys
        values: dict[str, Any] = {key: row.get(key) for key in keys}
        if keys and all(value is not None for value in values.values()):
            return and_(*(table.clause.c[key] == value for key, value in values.items()))
        return self._fallback.predicate(table, row)


def identity_strategy(name: IdentityName) -> RowIdentity:
    """Return the row identity strategy registered under the given name."""
    strategies: dict[str, type[RowIdentity]] = {
        "row": FullRowIdentity,
        "primary-key": PrimaryKeyIdentity,
    }
    if name not in strategies:
        msg = f"Unknown identity strategy: {name}"
        raise ValueError(msg)
    return strategies[name]()
