"""PDF first-page rendering with an ordered fallback chain.

Tiers, tried in order until one writes the target JPEG:
1. Ghostscript - direct render of page 1
2. ImageMagick - page 1 via its PDF delegate (Ghostscript underneath), flattened on white
3. Placeholder - a neutral Pillow-drawn image naming the file (degraded output)
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from jpegit.config.constants import DEFAULT_PLACEHOLDER_COLOR, DEFAULT_PLACEHOLDER_TEXT_COLOR
from jpegit.converters.base import BaseStrategy
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.core.tools import TOOL_SPECS, Tool
from jpegit.utils.fs import output_exists, remove_quietly
from jpegit.utils.logging import get_logger
from jpegit.utils.process import run_tool

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)

PLACEHOLDER_NOTE = "Full PDF support requires Ghostscript"


@dataclass(frozen=True)
class TierAttempt:
    """What a single tier achieved."""

    produced: bool
    detail: str = ""


@dataclass(frozen=True)
class PdfTier:
    """One step of the PDF fallback chain."""

    name: str
    render: Callable[[Path, Path, ToolAvailability, str], TierAttempt]
    success_message: str
    degraded: bool = False


class PdfStrategy(BaseStrategy):
    """Render the first page of a PDF, degrading to a placeholder if no renderer works."""

    name = "pdf"
    category = FileCategory.PDF

    def __init__(
        self,
        settings: JpegitSettings | None = None,
        tiers: list[PdfTier] | None = None,
    ) -> None:
        super().__init__(settings)
        self.tiers = tiers if tiers is not None else self.default_tiers()

    def default_tiers(self) -> list[PdfTier]:
        return [
            PdfTier(
                name="Ghostscript",
                render=self._render_ghostscript,
                success_message="Rendered first page with Ghostscript",
            ),
            PdfTier(
                name="ImageMagick",
                render=self._render_imagemagick,
                success_message="Rendered first page with ImageMagick",
            ),
            PdfTier(
                name="placeholder",
                render=self._render_placeholder,
                success_message=(
                    "Placeholder generated (degraded): install Ghostscript for full PDF support"
                ),
                degraded=True,
            ),
        ]

    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        return self.render(source, output, tools)

    def render(
        self,
        source: Path,
        output: Path,
        tools: ToolAvailability,
        label: str | None = None,
    ) -> ConversionResult:
        """Run the tiers in order and stop at the first that writes ``output``.

        Args:
            source: PDF file
            output: Target JPEG path
            tools: Session tool snapshot
            label: Name shown on a placeholder (defaults to the PDF's file name)

        Returns:
            ConversionResult naming the tier that succeeded
        """
        label = label or source.name
        failures: list[str] = []

        for tier in self.tiers:
            remove_quietly(output)
            attempt = tier.render(source, output, tools, label)

            if attempt.produced and output_exists(output):
                log.info("PDF rendered", tier=tier.name, degraded=tier.degraded)
                return ConversionResult.ok(output, tier.success_message, degraded=tier.degraded)

            detail = attempt.detail or "no output file was produced"
            log.debug("PDF tier failed", tier=tier.name, detail=detail)
            failures.append(f"{tier.name}: {detail}")

        hint = TOOL_SPECS[Tool.GHOSTSCRIPT].install_hint
        return ConversionResult.failed(
            f"PDF conversion failed. {hint} Attempts: {'; '.join(failures)}"
        )

    def _render_ghostscript(
        self, source: Path, output: Path, tools: ToolAvailability, label: str
    ) -> TierAttempt:
        gs = tools.path_for(Tool.GHOSTSCRIPT)
        if gs is None:
            return TierAttempt(False, "not installed")

        run = run_tool(
            [
                gs,
                "-dNOPAUSE",
                "-dBATCH",
                "-dSAFER",
                "-sDEVICE=jpeg",
                f"-dJPEGQ={self.settings.pdf.jpeg_quality}",
                f"-r{self.settings.pdf.dpi}",
                "-dFirstPage=1",
                "-dLastPage=1",
                "-dTextAlphaBits=4",
                "-dGraphicsAlphaBits=4",
                f"-sOutputFile={output}",
                source,
            ],
            timeout=self.timeout,
        )
        return TierAttempt(run.ok, run.diagnostics)

    def _render_imagemagick(
        self, source: Path, output: Path, tools: ToolAvailability, label: str
    ) -> TierAttempt:
        magick = tools.path_for(Tool.IMAGEMAGICK)
        if magick is None:
            return TierAttempt(False, "not installed")

        run = run_tool(
            [
                magick,
                "-density",
                str(self.settings.pdf.dpi),
                f"{source}[0]",
                "-background",
                "white",
                "-alpha",
                "remove",
                "-flatten",
                "-quality",
                str(self.settings.pdf.jpeg_quality),
                output,
            ],
            timeout=self.timeout,
        )
        return TierAttempt(run.ok, run.diagnostics)

    def _render_placeholder(
        self, source: Path, output: Path, tools: ToolAvailability, label: str
    ) -> TierAttempt:
        try:
            create_placeholder(
                output,
                label,
                size=(self.settings.pdf.placeholder_width, self.settings.pdf.placeholder_height),
                quality=self.settings.pdf.jpeg_quality,
            )
        except OSError as e:
            return TierAttempt(False, f"could not write placeholder: {e}")
        return TierAttempt(True)


def create_placeholder(
    output: Path,
    label: str,
    size: tuple[int, int],
    quality: int,
    note: str = PLACEHOLDER_NOTE,
) -> Path:
    """Draw a neutral placeholder JPEG annotated with a file name and a note.

    Args:
        output: Target JPEG path
        label: File name to print on the image
        size: (width, height) in pixels
        quality: JPEG quality
        note: Explanation printed under the file name

    Returns:
        The output path
    """
    width, height = size
    image = Image.new("RGB", size, DEFAULT_PLACEHOLDER_COLOR)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default(size=max(12, width // 32))

    lines = ["PDF preview", "", *textwrap.wrap(label, max(16, width // 16)), "", note]
    text = "\n".join(lines)
    origin = (width // 16, height // 3)

    try:
        draw.multiline_text(origin, text, fill=DEFAULT_PLACEHOLDER_TEXT_COLOR, font=font, spacing=8)
    except UnicodeEncodeError:
        # Bitmap fallback font only covers Latin-1
        text = text.encode("latin-1", errors="replace").decode("latin-1")
        draw.multiline_text(origin, text, fill=DEFAULT_PLACEHOLDER_TEXT_COLOR, font=font, spacing=8)

    image.save(output, "JPEG", quality=quality)
    return output
