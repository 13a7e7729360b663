"""Column value variants and literal substring replacement.

Scanned column values arrive as whatever the driver produces for the column.
This module sorts them into a small set of variants and gives each one a single
canonical string rendering, which is what the search literal is matched
against.
"""

from dataclasses import dataclass
from typing import assert_never

ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class Null:
    """A SQL NULL."""


@dataclass(frozen=True, slots=True)
class Text:
    """A value the driver returned as a string."""

    value: str


@dataclass(frozen=True, slots=True)
class Bytes:
    """A value the driver returned as raw bytes."""

    value: bytes


@dataclass(frozen=True, slots=True)
class Other:
    """Any other scalar, compared through its string form."""

    value: object


type Value = Null | Text | Bytes | Other

NULL = Null()


def classify(raw_value: object) -> Value:
    """Wrap a raw driver value in its variant."""
    if raw_value is None:
        return NULL
    if isinstance(raw_value, str):
        return Text(raw_value)
    if isinstance(raw_value, bytes | bytearray | memoryview):
        return Bytes(bytes(raw_value))
    return Other(raw_value)


def render(value: Value) -> str | None:
    """Render a value to the string the search literal is matched against."""
    match value:
        case Null():
            return None
        case Text(text):
            return text
        case Bytes(data):
            # surrogateescape keeps undecodable bytes so they survive a rewrite
            return data.decode(ENCODING, "surrogateescape")
        case Other(scalar):
            return str(scalar)
        case _:
            assert_never(value)


def substitute(value: Value, search: str, replace: str) -> str | bytes | None:
    """Replace every occurrence of search in the value.

    The replacement is literal, case-sensitive and non-overlapping, scanning left
    to right. Returns the new raw value, or None when the value is NULL or does
    not change. Bytes values stay bytes.
    """
    original = render(value)
    if original is None:
        return None

    replaced = original.replace(search, replace)
    if replaced == original:
        return None

    if isinstance(value, Bytes):
        return replaced.encode(ENCODING, "surrogateescape")
    return replaced
