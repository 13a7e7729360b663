"""Connection handling for the target database."""

from collections.abc import Iterator
from contextlib import contextmanager
from logging import getLogger

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from replace.config import Config
from replace.errors import ConnectionFailedError

logger = getLogger(__name__)


def connect(config: Config) -> Engine:
    """Create the engine for the configured database without connecting."""
    url = config.url_object()
    try:
        return create_engine(url, pool_pre_ping=True)
    except SQLAlchemyError as e:
        msg = f"Failed to connect to database: {e}"
        raise ConnectionFailedError(msg) from e


@contextmanager
def open_database(config: Config) -> Iterator[Engine]:
    """Open the database, verify it is reachable, and dispose of it on exit."""
    engine = connect(config)
    try:
        logger.debug(
            "Connecting to %s",
            engine.url.render_as_string(hide_password=True),
        )
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            msg = f"Failed to connect to database: {e}"
            raise ConnectionFailedError(msg) from e
        yield engine
    finally:
        engine.dispose()
