"""Tests for table enumeration, column classification and row scanning."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from sqlite3 import connect

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError

from replace.inspection import Database, is_text_type


@pytest.fixture(name="engine")
def sample_database() -> Generator[Engine]:
    """Create a temporary SQLite database with mixed column types."""
    with tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False) as tmp:
        db_path = Path(tmp.name)

    conn = connect(db_path)
    conn.executescript(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name VARCHAR(100),
            bio TEXT,
            code CHAR(4),
            age INTEGER,
            photo BLOB
        );
        CREATE TABLE numbers (a INTEGER, b REAL);
        CREATE TABLE pairs (
            left_id INTEGER,
            right_id INTEGER,
            label NVARCHAR(20),
            PRIMARY KEY (left_id, right_id)
        );
        INSERT INTO users (name, bio, code, age) VALUES ('Alice', 'hi', 'A001', 30);
        INSERT INTO users (name, bio, code, age) VALUES ('Bob', NULL, 'B002', NULL);
        """,
    )
    conn.commit()
    conn.close()

    engine = create_engine(f"sqlite:///{db_path}")
    yield engine

    engine.dispose()
    db_path.unlink()


@pytest.mark.parametrize(
    ("type_name", "expected"),
    [
        ("varchar(255)", True),
        ("VARCHAR(255)", True),
        ("char(4)", True),
        ("text", True),
        ("LONGTEXT", True),
        ("tinytext", True),
        ("NVARCHAR(20)", True),
        ("CHARACTER VARYING", True),
        ("int(11)", False),
        ("INTEGER", False),
        ("BLOB", False),
        ("datetime", False),
        ("enum('a','b')", False),
    ],
)
def test_is_text_type(type_name: str, *, expected: bool) -> None:
    """Test case-insensitive substring classification of declared types."""
    assert is_text_type(type_name) is expected


def test_tables(engine: Engine) -> None:
    """Test that every table is listed."""
    database = Database(engine)
    assert set(database.tables) == {"users", "numbers", "pairs"}


def test_table_cache(engine: Engine) -> None:
    """Test that table instances are reused."""
    database = Database(engine)
    assert database.table("users") is database.table("users")


def test_text_columns(engine: Engine) -> None:
    """Test that only textual columns are classified, in schema order."""
    database = Database(engine)
    assert database.table("users").text_columns == ("name", "bio", "code")
    assert database.table("pairs").text_columns == ("label",)


def test_text_columns_empty(engine: Engine) -> None:
    """Test a table without any text column."""
    database = Database(engine)
    assert database.table("numbers").text_columns == ()


def test_columns_and_primary_keys(engine: Engine) -> None:
    """Test reflected column names and primary keys."""
    database = Database(engine)
    users = database.table("users")
    assert users.columns == ("id", "name", "bio", "code", "age", "photo")
    assert users.primary_keys == ("id",)
    assert database.table("pairs").primary_keys == ("left_id", "right_id")
    assert database.table("numbers").primary_keys == ()


def test_missing_table_propagates(engine: Engine) -> None:
    """Test that introspection errors reach the caller."""
    database = Database(engine)
    with pytest.raises(SQLAlchemyError):
        _ = database.table("missing").text_columns


def test_rows(engine: Engine) -> None:
    """Test that a scan yields every row keyed by column name."""
    database = Database(engine)
    rows = [row._mapping for row in database.table("users").rows()]  # noqa: SLF001

    assert len(rows) == 2
    assert rows[0]["name"] == "Alice"
    assert rows[0]["code"] == "A001"
    assert rows[1]["bio"] is None
    assert list(rows[0].keys()) == ["id", "name", "bio", "code", "age", "photo"]


def test_rows_empty_table(engine: Engine) -> None:
    """Test that an empty table yields no rows."""
    database = Database(engine)
    assert list(database.table("numbers").rows()) == []
