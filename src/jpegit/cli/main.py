"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from jpegit import __version__
from jpegit.cli.commands.convert import convert
from jpegit.cli.commands.tools import tools
from jpegit.config.constants import APP_NAME

# Load environment variables (tool install dirs, JPEGIT_* settings) from .env
load_dotenv()

app = typer.Typer(
    name=APP_NAME,
    help="Convert images, PDFs, video, audio and office documents into JPEG previews.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="convert", help="Convert files into one JPEG each.")(convert)
app.command(name="tools", help="Show which external tools are available.")(tools)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]{APP_NAME}[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """jpegit - normalize mixed media into JPEG previews.

    Every input yields one JPEG (or a recorded failure) using whichever of
    ImageMagick, Ghostscript, ffmpeg, ExifTool and LibreOffice are installed.
    """
    pass


if __name__ == "__main__":
    app()
