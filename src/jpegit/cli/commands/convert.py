"""Convert command: normalize a batch of files into JPEGs."""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from jpegit.config import get_settings
from jpegit.config.settings import JpegitSettings
from jpegit.core.combiner import CombineDirection
from jpegit.core.models import ConversionResult
from jpegit.core.pipeline import ConversionSession, SessionOutcome
from jpegit.core.report import ReportEntry, SessionReport
from jpegit.exceptions import ConfigurationError
from jpegit.utils.fs import discover_files
from jpegit.utils.logging import get_logger, setup_task_logging

console = Console()
log = get_logger(__name__)


def convert(
    inputs: Annotated[
        list[Path],
        typer.Argument(help="Files and/or directories to convert."),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for JPEGs (default: ./output).",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    combine: Annotated[
        bool,
        typer.Option("--combine", help="Append all produced JPEGs into one composite image."),
    ] = False,
    direction: Annotated[
        CombineDirection | None,
        typer.Option("--direction", help="Combine direction.", case_sensitive=False),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recursively expand input directories."),
    ] = False,
    timeout: Annotated[
        int | None,
        typer.Option("--timeout", help="Per-tool timeout in seconds (0 disables)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the session report as JSON."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs on the console."),
    ] = False,
) -> None:
    """Convert files into one JPEG preview each."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2) from e
    settings = _apply_overrides(settings, direction=direction, timeout=timeout)

    _, log_path = setup_task_logging(
        settings.log_dir,
        prefix="convert",
        verbose=verbose,
        json_format=settings.log_format == "json",
    )
    log.info("Logs will be saved to", log_file=str(log_path))

    files = discover_files(inputs, recursive=recursive)
    if not files:
        console.print("[yellow]No input files found.[/yellow]")
        raise typer.Exit(0)

    output_dir = output or settings.get_output_dir(Path.cwd()).absolute()
    output_dir.mkdir(parents=True, exist_ok=True)

    session = ConversionSession(output_dir, settings=settings)
    if as_json:
        outcome = session.run(files, combine=combine)
        typer.echo(json.dumps(_outcome_to_dict(outcome), indent=2, ensure_ascii=False))
    else:
        outcome = _run_with_progress(session, files, combine)
        _display_results(outcome.report)
        _display_summary(outcome.report, output_dir)
        if combine:
            _display_combined(outcome.combined)

    raise typer.Exit(0 if outcome.all_succeeded else 1)


def _apply_overrides(
    settings: JpegitSettings, direction: CombineDirection | None, timeout: int | None
) -> JpegitSettings:
    """Validate CLI options and fold them into a copy of the settings."""
    if timeout is not None and timeout < 0:
        console.print("[red]--timeout must be 0 or a positive number of seconds[/red]")
        raise typer.Exit(2)

    update = {}
    if direction is not None:
        update["combine"] = settings.combine.model_copy(update={"direction": direction.value})
    if timeout is not None:
        update["tools"] = settings.tools.model_copy(update={"timeout": timeout})
    return settings.model_copy(update=update) if update else settings


def _run_with_progress(
    session: ConversionSession, files: list[Path], combine: bool
) -> SessionOutcome:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Converting", total=len(files))

        def on_progress(entry: ReportEntry) -> None:
            progress.update(task_id, advance=1, description=f"Converted {escape(entry.source)}")

        return session.run(files, combine=combine, on_progress=on_progress)


def _display_results(report: SessionReport) -> None:
    """Display one row per processed file."""
    table = Table(title="Conversion Results")
    table.add_column("File", overflow="fold")
    table.add_column("Category")
    table.add_column("Output", overflow="fold")
    table.add_column("Status")
    table.add_column("Message", overflow="fold")

    for entry in report:
        if not entry.succeeded:
            status = "[red]Failed[/red]"
        elif entry.degraded:
            status = "[yellow]Success (degraded)[/yellow]"
        else:
            status = "[green]Success[/green]"
        table.add_row(
            escape(entry.source),
            entry.category.value,
            escape(entry.output),
            status,
            escape(entry.message),
        )

    console.print(table)


def _display_summary(report: SessionReport, output_dir: Path) -> None:
    """Display batch totals."""
    console.print()
    console.print(
        f"Total: {len(report)}  "
        f"Succeeded: {report.success_count}  "
        f"Failed: {report.failed_count}  "
        f"Degraded: {report.degraded_count}"
    )
    console.print(f"Output directory: {escape(str(output_dir))}")


def _display_combined(combined: ConversionResult | None) -> None:
    if combined is None:
        console.print("[yellow]Combine skipped: fewer than two images were produced.[/yellow]")
    elif combined.success:
        console.print(f"[green]Combined image:[/green] {escape(str(combined.output_path))}")
    else:
        console.print(f"[red]Combine failed:[/red] {escape(combined.message)}")


def _outcome_to_dict(outcome: SessionOutcome) -> dict:
    combined = outcome.combined
    return {
        "entries": outcome.report.to_dicts(),
        "summary": {
            "total": len(outcome.report),
            "succeeded": outcome.report.success_count,
            "failed": outcome.report.failed_count,
            "degraded": outcome.report.degraded_count,
        },
        "combined": None
        if combined is None
        else {
            "success": combined.success,
            "message": combined.message,
            "output_path": str(combined.output_path) if combined.output_path else None,
        },
    }
