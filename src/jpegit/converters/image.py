"""Raster image conversion through ImageMagick, with optional ExifTool metadata copy."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.converters.base import BaseStrategy
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.core.tools import Tool
from jpegit.exceptions import EngineError
from jpegit.utils.fs import output_exists
from jpegit.utils.logging import get_logger
from jpegit.utils.process import run_tool

if TYPE_CHECKING:
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)


class ImageStrategy(BaseStrategy):
    """Re-encode any raster format ImageMagick reads into a high-quality JPEG."""

    name = "image"
    category = FileCategory.IMAGE

    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        magick = tools.require(Tool.IMAGEMAGICK, source)

        # [0] selects the first frame of animated/multi-page inputs
        self.invoke(
            "ImageMagick",
            [
                magick,
                f"{source}[0]",
                "-auto-orient",
                "-strip",
                "-quality",
                str(self.settings.image.jpeg_quality),
                output,
            ],
            source,
            output,
        )
        message = "Converted with ImageMagick"

        if not self.settings.image.copy_metadata:
            return ConversionResult.ok(output, message)

        exiftool = tools.path_for(Tool.EXIFTOOL)
        if exiftool is None:
            log.info("ExifTool not installed, metadata not copied")
            return ConversionResult.ok(
                output, f"{message}; metadata not copied (ExifTool not installed)"
            )

        return self._copy_metadata(exiftool, source, output, message)

    def _copy_metadata(
        self, exiftool: Path, source: Path, output: Path, message: str
    ) -> ConversionResult:
        """Copy EXIF/IPTC/XMP tags from the source onto the converted JPEG in place."""
        run = run_tool(
            [
                exiftool,
                "-overwrite_original",
                "-TagsFromFile",
                source,
                "-EXIF:all",
                "-IPTC:all",
                "-XMP:all",
                output,
            ],
            timeout=self.timeout,
        )

        if not output_exists(output):
            raise EngineError(source, "ExifTool", "output file was lost during metadata copy")

        if not run.ok:
            log.warning("Metadata copy failed", error=run.diagnostics)
            return ConversionResult.ok(
                output, f"{message}; metadata copy failed: {run.diagnostics}"
            )

        return ConversionResult.ok(output, f"{message}; metadata copied with ExifTool")
