"""Literal find-and-replace across the text columns of a database."""

from replace.config import Config, IdentityName, UntargetablePolicy
from replace.connection import connect, open_database
from replace.engine import Replacer, row_changes
from replace.errors import (
    ConfigError,
    ConnectionFailedError,
    EnumerationError,
    ReplaceError,
    UntargetableRowError,
)
from replace.identity import (
    FullRowIdentity,
    PrimaryKeyIdentity,
    RowIdentity,
    identity_strategy,
)
from replace.inspection import Database, Table, is_text_type
from replace.main import replace_database, run
from replace.report import (
    RunReport,
    TableReport,
    report_to_json,
    report_to_summary,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConnectionFailedError",
    "Database",
    "EnumerationError",
    "FullRowIdentity",
    "IdentityName",
    "PrimaryKeyIdentity",
    "ReplaceError",
    "Replacer",
    "RowIdentity",
    "RunReport",
    "Table",
    "TableReport",
    "UntargetablePolicy",
    "UntargetableRowError",
    "connect",
    "identity_strategy",
    "is_text_type",
    "open_database",
    "replace_database",
    "report_to_json",
    "report_to_summary",
    "row_changes",
    "run",
]
