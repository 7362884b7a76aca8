"""Audio waveform rendering with ffmpeg."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.converters.base import BaseStrategy
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.core.tools import Tool

if TYPE_CHECKING:
    from jpegit.core.tools import ToolAvailability


class AudioStrategy(BaseStrategy):
    """Render the first audio stream as a fixed-size waveform picture."""

    name = "audio"
    category = FileCategory.AUDIO

    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        ffmpeg = tools.require(Tool.FFMPEG, source)
        size = f"{self.settings.audio.waveform_width}x{self.settings.audio.waveform_height}"

        self.invoke(
            "ffmpeg",
            [
                ffmpeg,
                "-hide_banner",
                "-loglevel",
                "error",
                "-y",
                "-i",
                source,
                "-filter_complex",
                f"[0:a:0]showwavespic=s={size}",
                "-frames:v",
                "1",
                output,
            ],
            source,
            output,
        )
        return ConversionResult.ok(output, f"Rendered {size} waveform with ffmpeg")
