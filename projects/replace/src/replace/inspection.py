"""Database inspection functionality using SQLAlchemy reflection."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any

from sqlalchemy import column, inspect, literal_column, select, table
from sqlalchemy.exc import CompileError, SQLAlchemyError

from replace.errors import EnumerationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine, Inspector, Row, TableClause
    from sqlalchemy.engine.interfaces import Dialect, ReflectedColumn


TEXT_TYPE_MARKERS = ("char", "text", "varchar")


def is_text_type(type_name: str) -> bool:
    """Return whether a declared column type holds text."""
    lowered = type_name.lower()
    return any(marker in lowered for marker in TEXT_TYPE_MARKERS)


def declared_type(column_info: ReflectedColumn, dialect: Dialect) -> str:
    """Render the declared type of a reflected column in the database's dialect."""
    column_type = column_info["type"]
    try:
        return column_type.compile(dialect=dialect)
    except CompileError:
        return type(column_type).__name__


class Database:
    """Inspects a database to list its tables."""

    def __init__(self, engine: Engine) -> None:
        """Initialize with the engine of the target database."""
        self.engine = engine
        self._table_cache: dict[str, Table] = {}

    @cached_property
    def inspector(self) -> Inspector:
        """Return the schema inspector for this database."""
        return inspect(self.engine)

    @cached_property
    def tables(self) -> tuple[str, ...]:
        """Return all table names in the database."""
        try:
            return tuple(self.inspector.get_table_names())
        except SQLAlchemyError as e:
            msg = f"Failed to get tables: {e}"
            raise EnumerationError(msg) from e

    def table(self, table_name: str) -> Table:
        """Return a Table instance for the given table name."""
        if table_name not in self._table_cache:
            self._table_cache[table_name] = Table(self, table_name)
        return self._table_cache[table_name]


class Table:
    """A single table with its reflected schema and a streaming row scan."""

    def __init__(self, database: Database, table_name: str) -> None:
        """Initialize table with its database and name."""
        self._database = database
        self.name = table_name

    @cached_property
    def schema(self) -> tuple[ReflectedColumn, ...]:
        """Return the reflected column metadata of this table."""
        return tuple(self._database.inspector.get_columns(self.name))

    @cached_property
    def columns(self) -> tuple[str, ...]:
        """Return column names for this table."""
        return tuple(column_info["name"] for column_info in self.schema)

    @cached_property
    def text_columns(self) -> tuple[str, ...]:
        """Return the names of columns whose declared type is textual."""
        dialect = self._database.engine.dialect
        return tuple(
            column_info["name"]
            for column_info in self.schema
            if is_text_type(declared_type(column_info, dialect))
        )

    @cached_property
    def primary_keys(self) -> tuple[str, ...]:
        """Return primary key column names for this table."""
        constraint = self._database.inspector.get_pk_constraint(self.name)
        return tuple(constraint.get("constrained_columns") or ())

    @cached_property
    def clause(self) -> TableClause:
        """Return a lightweight table construct for building statements."""
        return table(self.name, *(column(name) for name in self.columns))

    def rows(self) -> Iterator[Row[Any]]:
        """Return every row of this table, read on a dedicated connection.

        Rows are streamed where the dialect has server-side cursors. Otherwise
        the scan is read in full and its connection released before the first
        row is returned, since an open read on SQLite holds a lock that blocks
        commits from other connections.
        """
        query = select(literal_column("*")).select_from(self.clause)
        engine = self._database.engine

        if not streams_results(engine):
            with engine.connect() as connection:
                buffered = connection.execute(query).all()
            yield from buffered
            return

        with engine.connect() as connection:
            result = connection.execution_options(stream_results=True).execute(query)
            yield from result


def streams_results(engine: Engine) -> bool:
    """Return whether a scan can stay open while other connections commit."""
    dialect = engine.dialect
    return dialect.name != "sqlite" and dialect.supports_server_side_cursors
