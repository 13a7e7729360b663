"""Run a replacement across every table of a database."""

from logging import getLogger

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from replace.config import Config
from replace.connection import open_database
from replace.engine import Replacer
from replace.identity import identity_strategy
from replace.inspection import Database
from replace.report import RunReport, TableReport, log_table, log_total

logger = getLogger(__name__)


def replace_database(engine: Engine, config: Config) -> RunReport:
    """Replace the configured literal in every table reachable through the engine.

    Errors raised by the database while processing a table are logged and the
    table is abandoned; the run continues with the next table. Failing to list
    the tables and finding an untargetable row in abort mode end the run.
    """
    database = Database(engine)
    tables = database.tables
    logger.debug("Found %d tables to process", len(tables))

    replacer = Replacer(
        database,
        config.search,
        config.replace,
        identity=identity_strategy(config.identity),
        on_untargetable=config.on_untargetable,
    )

    run = RunReport()
    for table_name in tables:
        try:
            report = replacer.process_table(database.table(table_name))
        except SQLAlchemyError as e:
            report = TableReport(table_name, error=str(e))
        log_table(report, verbose=config.verbose)
        run = run.add(report)

    log_total(run)
    return run


def run(config: Config) -> RunReport:
    """Validate the configuration, connect, and replace across the database."""
    config.validate()
    with open_database(config) as engine:
        return replace_database(engine, config)
