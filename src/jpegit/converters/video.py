"""Video frame extraction with ffmpeg."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.converters.base import BaseStrategy
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.core.tools import Tool

if TYPE_CHECKING:
    from jpegit.core.tools import ToolAvailability


class VideoStrategy(BaseStrategy):
    """Grab a single frame a few seconds into the stream.

    Streams shorter than the offset yield no frame and are reported as failed
    with ffmpeg's own diagnostics.
    """

    name = "video"
    category = FileCategory.VIDEO

    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        ffmpeg = tools.require(Tool.FFMPEG, source)
        offset = self.settings.video.frame_offset

        self.invoke(
            "ffmpeg",
            [
                ffmpeg,
                "-hide_banner",
                "-loglevel",
                "error",
                "-y",
                "-ss",
                f"{offset:g}",
                "-i",
                source,
                "-frames:v",
                "1",
                "-q:v",
                str(self.settings.video.ffmpeg_quality),
                output,
            ],
            source,
            output,
        )
        return ConversionResult.ok(output, f"Extracted frame at {offset:g}s with ffmpeg")
