"""Tools command: report which external conversion engines were found."""

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from jpegit.core.tools import TOOL_SPECS, Tool, resolve_tools
from jpegit.utils.logging import setup_logging

console = Console()


def tools(
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print tool availability as JSON."),
    ] = False,
) -> None:
    """Show which external tools are installed and where they were found."""
    setup_logging(level="WARNING")

    availability = resolve_tools()
    rows = availability.describe()

    if as_json:
        typer.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="External Tools")
    table.add_column("Tool", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Location", overflow="fold")
    table.add_column("Source", no_wrap=True)
    table.add_column("Env Var")

    for row in rows:
        status = "[green]found[/green]" if row["available"] else "[red]missing[/red]"
        table.add_row(row["name"], status, row["path"] or "-", row["source"], row["env_var"])

    console.print(table)

    missing = [Tool(row["tool"]) for row in rows if not row["available"]]
    for tool in missing:
        console.print(f"[dim]{TOOL_SPECS[tool].install_hint}[/dim]")
