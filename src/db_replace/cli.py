"""Command line interface for DB Replace."""

import sys
from logging import DEBUG, INFO, getLogger
from typing import Annotated, Literal

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from replace import (
    Config,
    ConfigError,
    ConnectionFailedError,
    EnumerationError,
    IdentityName,
    RunReport,
    UntargetablePolicy,
    UntargetableRowError,
    report_to_json,
    report_to_summary,
    run,
)

app = App(help="Replace a literal string in every text column of a database.")


type Format = Literal["none", "table", "json"]

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Send library log records to stderr through rich."""
    logger = getLogger("replace")
    logger.setLevel(DEBUG if verbose else INFO)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))


def format_report_table(run_report: RunReport) -> None:
    """Format the per-table replacement counts as a rich table."""
    table = Table(title="Replacement Results")
    table.add_column("Table", style="bold cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Replacements", style="bold yellow", justify="right")
    table.add_column("Error", style="red")

    for report in report_to_summary(run_report):
        table.add_row(
            report["name"],
            str(report["rows"]),
            str(report["updated"]),
            str(report["replacements"]),
            report["error"] or "",
        )

    table.add_section()
    table.add_row("Total", "", "", str(run_report.total), "")
    console.print(table)


@app.default
def replace_all(  # noqa: PLR0913
    *,
    host: str = "localhost",
    port: int = 3306,
    user: str = "",
    password: Annotated[str, Parameter(env_var="DB_REPLACE_PASSWORD")] = "",
    database: str = "",
    search: str = "",
    replace: str = "",
    verbose: Annotated[bool, Parameter(name=["--verbose", "-v"])] = False,
    url: str | None = None,
    identity: IdentityName = "row",
    on_untargetable: UntargetablePolicy = "abort",
    fmt: Format = "none",
) -> None:
    """Replace SEARCH with REPLACE in every text column of every table.

    Parameters
    ----------
    host
        MySQL host.
    port
        MySQL port.
    user
        MySQL user.
    password
        MySQL password.
    database
        Database name.
    search
        String to search for.
    replace
        String to replace with; empty deletes the occurrences.
    verbose
        Enable verbose output.
    url
        SQLAlchemy database URL, used instead of the MySQL connection flags.
    identity
        How rows are matched by the UPDATE: all non-null values, or the primary key.
    on_untargetable
        Abort the run or skip the row when a row cannot be matched.
    fmt
        Summary printed to stdout after the run.

    """
    configure_logging(verbose=verbose)

    config = Config(
        user=user,
        database=database,
        search=search,
        replace=replace,
        host=host,
        port=port,
        password=password,
        verbose=verbose,
        url=url,
        identity=identity,
        on_untargetable=on_untargetable,
    )

    try:
        run_report = run(config)
    except (ConfigError, ConnectionFailedError, EnumerationError) as e:
        print_error(str(e))
        sys.exit(1)
    except UntargetableRowError as e:
        print_error(f"Aborting run: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Replacement interrupted by user")
        sys.exit(1)

    if fmt == "json":
        sys.stdout.write(report_to_json(run_report))
    elif fmt == "table":
        format_report_table(run_report)

    if run_report.failed:
        print_success(
            f"Completed with {len(run_report.failed)} table(s) skipped after errors",
        )
    else:
        print_success("Replacement completed successfully")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
