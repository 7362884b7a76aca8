"""File category classification by extension."""

from enum import Enum
from pathlib import Path

from jpegit.config.constants import (
    AUDIO_EXTENSIONS,
    IMAGE_EXTENSIONS,
    OFFICE_EXTENSIONS,
    PDF_EXTENSIONS,
    VIDEO_EXTENSIONS,
)


class FileCategory(str, Enum):
    """Kinds of input file, each handled by one conversion strategy."""

    IMAGE = "image"
    PDF = "pdf"
    VIDEO = "video"
    AUDIO = "audio"
    OFFICE = "office"
    UNKNOWN = "unknown"


EXTENSION_CATEGORIES: dict[str, FileCategory] = {
    **{ext: FileCategory.IMAGE for ext in IMAGE_EXTENSIONS},
    **{ext: FileCategory.PDF for ext in PDF_EXTENSIONS},
    **{ext: FileCategory.VIDEO for ext in VIDEO_EXTENSIONS},
    **{ext: FileCategory.AUDIO for ext in AUDIO_EXTENSIONS},
    **{ext: FileCategory.OFFICE for ext in OFFICE_EXTENSIONS},
}


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and ensure it has exactly one leading dot."""
    ext = extension.strip().lower().lstrip(".")
    return f".{ext}" if ext else ""


def classify(extension: str) -> FileCategory:
    """Map a file extension to its category.

    Never raises: anything not in the extension table is UNKNOWN.

    Args:
        extension: Extension with or without leading dot, any case (e.g. "JPG", ".pdf")

    Returns:
        FileCategory
    """
    return EXTENSION_CATEGORIES.get(normalize_extension(extension), FileCategory.UNKNOWN)


def classify_path(path: str | Path) -> FileCategory:
    """Classify a file by its suffix."""
    return classify(Path(path).suffix)


def supported_extensions() -> set[str]:
    """Return all file extensions with a conversion strategy."""
    return set(EXTENSION_CATEGORIES)
