"""Row-by-row replacement and update of text columns."""

from __future__ import annotations

from contextlib import closing
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING

from sqlalchemy import update

from replace.errors import UntargetableRowError
from replace.identity import FullRowIdentity
from replace.report import TableReport
from replace.values import classify, render, substitute

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import RowMapping

    from replace.config import UntargetablePolicy
    from replace.identity import RowIdentity
    from replace.inspection import Database, Table

type Changes = dict[str, str | bytes]

logger = getLogger(__name__)

# Rows whose non-matching columns are logged in verbose mode
NO_MATCH_LOG_ROWS = 3


def row_changes(
    row: RowMapping,
    text_columns: Iterable[str],
    search: str,
    replace: str,
) -> Changes:
    """Return the new value of every text column that changes in this row.

    Columns missing from the row or holding NULL are skipped.
    """
    changes: Changes = {}
    for name in text_columns:
        if name not in row:
            continue
        if (new_value := substitute(classify(row[name]), search, replace)) is not None:
            changes[name] = new_value
    return changes


class Replacer:
    """Replaces a literal string in the text columns of a database's tables."""

    def __init__(
        self,
        database: Database,
        search: str,
        replace: str,
        *,
        identity: RowIdentity | None = None,
        on_untargetable: UntargetablePolicy = "abort",
    ) -> None:
        """Initialize the replacer for one search and replace pair."""
        self.database = database
        self.search = search
        self.replace = replace
        self.identity = identity or FullRowIdentity()
        self.on_untargetable = on_untargetable

    def update_row(self, table: Table, row: RowMapping, changes: Changes) -> None:
        """Write the changed values of one row in its own transaction."""
        statement = (
            update(table.clause)
            .values(changes)
            .where(self.identity.predicate(table, row))
        )
        with self.database.engine.begin() as connection:
            connection.execute(statement)

    def _log_row(
        self,
        row_number: int,
        row: RowMapping,
        text_columns: Iterable[str],
        changes: Changes,
    ) -> None:
        for name in text_columns:
            original = render(classify(row.get(name)))
            if original is None:
                continue
            if name in changes:
                logger.debug(
                    "Found match in column %s: '%s' -> '%s'",
                    name,
                    original,
                    render(classify(changes[name])),
                )
            elif row_number < NO_MATCH_LOG_ROWS:
                logger.debug(
                    "No match in column %s: '%s' (searching for: '%s')",
                    name,
                    original,
                    self.search,
                )

    def process_table(self, table: Table) -> TableReport:
        """Replace the search string in every row of one table.

        Tables without text columns are not scanned. Each changed row is updated
        immediately, so rows updated before a failure stay updated.
        """
        text_columns = table.text_columns
        logger.debug("Table %s: found text columns: %s", table.name, list(text_columns))

        if not text_columns:
            return TableReport(table.name)

        replacements = row_count = updated = skipped = 0
        with closing(table.rows()) as rows:
            for row in rows:
                mapping = row._mapping  # noqa: SLF001
                changes = row_changes(mapping, text_columns, self.search, self.replace)
                if logger.isEnabledFor(DEBUG):
                    self._log_row(row_count, mapping, text_columns, changes)

                if changes:
                    try:
                        self.update_row(table, mapping, changes)
                    except UntargetableRowError:
                        if self.on_untargetable == "abort":
                            raise
                        logger.warning(
                            "Skipping row in table %s: no non-null values to match",
                            table.name,
                        )
                        skipped += 1
                    else:
                        replacements += len(changes)
                        updated += 1
                row_count += 1

        logger.debug("Processed %d rows in table %s", row_count, table.name)

        return TableReport(
            table.name,
            replacements=replacements,
            rows=row_count,
            updated=updated,
            skipped=skipped,
        )
