"""Command-line interface for pymongo-legacy."""

import sys
import warnings

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .legacy import MANIFEST
from .utils.mongo_logger import LoggerEnvOptions, MongoLogger

app = typer.Typer(
    name="pymongo-legacy",
    help="Inspect the pymongo-legacy adapter layer and its configuration",
    no_args_is_help=True,
)

console = Console()
err_console = Console(file=sys.stderr)


@app.command()
def manifest(
    owner: str | None = typer.Option(
        None, "--owner", "-o", help="Only show operations of this adapter class"
    ),
) -> None:
    """List the operations that accept both calling conventions.

    Example:
        pymongo-legacy manifest --owner Collection
    """
    owners = MANIFEST.owners()
    if owner is not None:
        if owner not in owners:
            err_console.print(
                f"[red]Error:[/red] Unknown adapter class '{owner}'. "
                f"Known classes: {', '.join(owners)}"
            )
            raise typer.Exit(1)
        owners = (owner,)

    table = Table(title="Dual-mode operations")
    table.add_column("Class", style="cyan")
    table.add_column("Operation", style="bold")
    table.add_column("Arity", justify="right")
    table.add_column("Result")

    count = 0
    for name in owners:
        for entry in MANIFEST.operations(name):
            table.add_row(
                entry.owner,
                entry.operation,
                str(entry.arity),
                str(entry.wrap) if entry.wrap is not None else "-",
            )
            count += 1

    console.print(table)
    console.print(f"[dim]{count} operations[/dim]")


@app.command("log-config")
def log_config() -> None:
    """Show the driver log configuration resolved from MONGODB_LOG_* variables."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        options = MongoLogger.resolve_options(LoggerEnvOptions.from_environ())

    table = Table(title="Driver logging")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="bold")

    table.add_row("command", options.command.value)
    table.add_row("topology", options.topology.value)
    table.add_row("serverSelection", options.server_selection.value)
    table.add_row("connection", options.connection.value)
    table.add_row("default", options.default_severity.value)
    table.add_row("max document length", str(options.max_document_length))
    table.add_row("destination", str(options.log_destination))

    console.print(table)

    for warning in caught:
        err_console.print(
            Panel(str(warning.message), title="Warning", border_style="yellow")
        )


@app.command()
def version() -> None:
    """Show the pymongo-legacy version."""
    console.print(f"pymongo-legacy {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
