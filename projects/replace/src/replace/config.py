"""Run configuration for a database-wide replacement."""

from dataclasses import dataclass
from typing import Literal

from sqlalchemy import URL, make_url
from sqlalchemy.exc import ArgumentError

from replace.errors import ConfigError

type IdentityName = Literal["row", "primary-key"]
type UntargetablePolicy = Literal["abort", "skip"]

DEFAULT_DRIVER = "mysql+pymysql"


@dataclass(frozen=True)
class Config:
    """Immutable settings for one replacement run."""

    user: str = ""
    database: str = ""
    search: str = ""
    replace: str = ""
    host: str = "localhost"
    port: int = 3306
    password: str = ""
    verbose: bool = False
    url: str | None = None
    identity: IdentityName = "row"
    on_untargetable: UntargetablePolicy = "abort"

    def validate(self) -> None:
        """Check that the settings required for a run are present."""
        if not self.search:
            msg = "search must not be empty"
            raise ConfigError(msg)
        if self.url is None and not (self.user and self.database):
            msg = "user, database, and search are required"
            raise ConfigError(msg)

    def url_object(self) -> URL:
        """Return the SQLAlchemy URL of the target database."""
        if self.url is not None:
            try:
                return make_url(self.url)
            except (ArgumentError, ValueError) as e:
                msg = f"Invalid database URL: {e}"
                raise ConfigError(msg) from e

        return URL.create(
            DEFAULT_DRIVER,
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database,
        )
