"""Exceptions raised while replacing values across a database."""


class ReplaceError(Exception):
    """Base class for all replacement errors."""


class ConfigError(ReplaceError):
    """Raised when the run configuration is incomplete or invalid."""


class ConnectionFailedError(ReplaceError):
    """Raised when the database connection cannot be opened."""


class EnumerationError(ReplaceError):
    """Raised when the tables of the database cannot be listed."""


class UntargetableRowError(ReplaceError):
    """Raised when a row has no non-null value to build its WHERE clause from."""
