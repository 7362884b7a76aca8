"""Conversion strategies, one per file category."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jpegit.converters.audio import AudioStrategy
from jpegit.converters.base import BaseStrategy
from jpegit.converters.image import ImageStrategy
from jpegit.converters.office import OfficeStrategy
from jpegit.converters.pdf import PdfStrategy, PdfTier, TierAttempt, create_placeholder
from jpegit.converters.video import VideoStrategy
from jpegit.core.classifier import FileCategory

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings


def build_strategies(settings: JpegitSettings | None = None) -> dict[FileCategory, BaseStrategy]:
    """Create the strategy table used by the dispatcher.

    UNKNOWN has no entry; the dispatcher reports such files as unsupported.
    """
    pdf = PdfStrategy(settings)
    return {
        FileCategory.IMAGE: ImageStrategy(settings),
        FileCategory.PDF: pdf,
        FileCategory.VIDEO: VideoStrategy(settings),
        FileCategory.AUDIO: AudioStrategy(settings),
        FileCategory.OFFICE: OfficeStrategy(settings, pdf_strategy=pdf),
    }


__all__ = [
    "AudioStrategy",
    "BaseStrategy",
    "ImageStrategy",
    "OfficeStrategy",
    "PdfStrategy",
    "PdfTier",
    "TierAttempt",
    "VideoStrategy",
    "build_strategies",
    "create_placeholder",
]
