"""Append several JPEGs into one composite image with ImageMagick."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.config import get_settings
from jpegit.core.models import ConversionResult
from jpegit.core.tools import TOOL_SPECS, Tool
from jpegit.utils.fs import output_exists, remove_quietly
from jpegit.utils.logging import get_logger
from jpegit.utils.process import run_tool

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)


class CombineDirection(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    @property
    def append_flag(self) -> str:
        """ImageMagick flag: -append stacks top to bottom, +append left to right."""
        return "-append" if self is CombineDirection.VERTICAL else "+append"


def combine_images(
    paths: Sequence[Path],
    output_path: Path,
    direction: CombineDirection | str,
    tools: ToolAvailability,
    settings: JpegitSettings | None = None,
) -> ConversionResult:
    """Append images in the given order along one axis.

    Callers are expected to pass only successfully produced JPEGs.

    Args:
        paths: Two or more existing images, in output order
        output_path: Composite JPEG to write
        direction: "vertical" or "horizontal"
        tools: Session tool snapshot
        settings: Optional settings (JPEG quality, timeout)

    Returns:
        ConversionResult for the composite image
    """
    settings = settings or get_settings()
    direction = CombineDirection(direction)

    magick = tools.path_for(Tool.IMAGEMAGICK)
    if magick is None:
        return ConversionResult.failed(
            f"Combining images requires ImageMagick. {TOOL_SPECS[Tool.IMAGEMAGICK].install_hint}"
        )

    if len(paths) < 2:
        return ConversionResult.failed(
            f"at least two images are required to combine (got {len(paths)})"
        )

    log.info("Combining images", count=len(paths), direction=direction.value)
    remove_quietly(output_path)

    run = run_tool(
        [
            magick,
            *paths,
            "-background",
            "white",
            direction.append_flag,
            "-quality",
            str(settings.combine.jpeg_quality),
            output_path,
        ],
        timeout=settings.tools.effective_timeout,
    )

    if not run.ok:
        return ConversionResult.failed(f"ImageMagick failed to combine images: {run.diagnostics}")
    if not output_exists(output_path):
        return ConversionResult.failed("ImageMagick did not produce the combined image")

    return ConversionResult.ok(
        output_path, f"Combined {len(paths)} images {direction.value}ly with ImageMagick"
    )
