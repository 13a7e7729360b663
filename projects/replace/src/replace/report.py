"""Replacement counts per table and for the whole run."""

from __future__ import annotations

import json
from logging import getLogger
from typing import Any, NamedTuple

logger = getLogger(__name__)


class TableReport(NamedTuple):
    """Outcome of processing a single table."""

    name: str
    replacements: int = 0
    rows: int = 0
    updated: int = 0
    skipped: int = 0
    error: str | None = None


class RunReport(NamedTuple):
    """Outcome of a whole run, aggregated from its table reports."""

    tables: tuple[TableReport, ...] = ()

    @property
    def total(self) -> int:
        """Total number of changed column values across all tables."""
        return sum(report.replacements for report in self.tables)

    @property
    def failed(self) -> tuple[TableReport, ...]:
        """Tables that were abandoned because of an error."""
        return tuple(report for report in self.tables if report.error is not None)

    def add(self, report: TableReport) -> RunReport:
        """Return a new run report including the given table report."""
        return RunReport((*self.tables, report))


def log_table(report: TableReport, *, verbose: bool = False) -> None:
    """Log the result line for one table."""
    if report.error is not None:
        logger.error("Error processing table %s: %s", report.name, report.error)
    elif report.replacements > 0 or verbose:
        logger.info("Table %s: %d replacements", report.name, report.replacements)


def log_total(run: RunReport) -> None:
    """Log the final total line."""
    logger.info("Total replacements: %d", run.total)


def report_to_summary(run: RunReport) -> list[dict[str, Any]]:
    """Convert a run report to one dictionary per table.

    Each dictionary contains:
        - name: table name
        - replacements: changed column values
        - rows: rows scanned
        - updated: rows updated
        - skipped: rows left untouched because they could not be targeted
        - error: error message, or None
    """
    return [report._asdict() for report in run.tables]


def report_to_json(run: RunReport) -> str:
    """Convert a run report to a JSON string."""
    return json.dumps(
        {"tables": report_to_summary(run), "total": run.total},
        ensure_ascii=False,
    )
