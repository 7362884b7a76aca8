"""File system utilities for jpegit.

Provides output naming, input accessibility checks and input discovery.
"""

import os
import re
from pathlib import Path

from jpegit.config.constants import OUTPUT_SUFFIX
from jpegit.exceptions import AccessError
from jpegit.utils.logging import get_logger

log = get_logger(__name__)

# Characters illegal in file names on at least one supported platform
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE_RUN = re.compile(r"\s+")


def safe_filename(filename: str) -> str:
    """Replace illegal characters and whitespace runs with underscores.

    Args:
        filename: Original file name (without directory)

    Returns:
        Safe filename
    """
    result = _WHITESPACE_RUN.sub("_", filename)
    return _ILLEGAL_CHARS.sub("_", result)


def derive_output_name(source: str | Path) -> str:
    """Derive the JPEG file name produced for a source file.

    The base name is sanitized and the original extension (case preserved,
    without the dot) is appended so that ``report.pdf`` and ``report.docx``
    never collide.

    Example:
        >>> derive_output_name("/photos/my photo.JPG")
        'my_photo_JPG.jpg'

    Args:
        source: Input file path

    Returns:
        Output file name
    """
    path = Path(source)
    stem = safe_filename(path.stem) or "file"
    extension = safe_filename(path.suffix.lstrip("."))

    if extension:
        return f"{stem}_{extension}{OUTPUT_SUFFIX}"
    return f"{stem}{OUTPUT_SUFFIX}"


def check_readable(path: Path) -> None:
    """Verify that a file exists, is non-empty, and can be opened for reading.

    Args:
        path: File to check

    Raises:
        AccessError: With the specific reason the file cannot be processed
    """
    try:
        if not path.exists():
            raise AccessError(path, "file not found")
        if not path.is_file():
            raise AccessError(path, "not a regular file")
        if path.stat().st_size == 0:
            raise AccessError(path, "file is empty")

        with open(path, "rb") as f:
            f.read(1)
    except OSError as e:
        raise AccessError(path, f"file is not readable: {e.strerror or e}", cause=e) from e


def output_exists(path: Path) -> bool:
    """Check that an engine actually wrote a non-empty output file."""
    return path.is_file() and path.stat().st_size > 0


def remove_quietly(path: Path) -> None:
    """Delete a file if present, logging instead of raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        log.warning("Could not remove file", path=str(path), error=str(e))


def discover_files(paths: list[Path], recursive: bool = False) -> list[Path]:
    """Expand a mix of files and directories into an ordered list of absolute file paths.

    Files are kept in the order given. Directories are expanded in sorted
    order; hidden files are skipped. Paths that do not exist are passed
    through unchanged so that the dispatcher reports them.

    Args:
        paths: Files and/or directories
        recursive: Descend into subdirectories

    Returns:
        List of absolute file paths
    """
    files: list[Path] = []

    for path in paths:
        path = path.expanduser()
        if not path.is_dir():
            files.append(path.absolute())
            continue

        if recursive:
            candidates = []
            for root, dirs, names in os.walk(path):
                dirs[:] = [d for d in dirs if not d.startswith(".")]
                candidates.extend(Path(root) / name for name in names)
        else:
            candidates = [p for p in path.iterdir() if p.is_file()]

        expanded = sorted(p.absolute() for p in candidates if not p.name.startswith("."))
        log.debug("Expanded directory", directory=str(path), files=len(expanded))
        files.extend(expanded)

    return files
