"""Value objects passed between the dispatcher and conversion strategies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jpegit.core.classifier import FileCategory, classify_path
from jpegit.utils.fs import derive_output_name


@dataclass(frozen=True)
class ConversionRequest:
    """One file to convert."""

    source: Path
    output: Path
    category: FileCategory

    @classmethod
    def for_file(cls, source: Path, output_dir: Path) -> ConversionRequest:
        """Build a request with the derived output path and category."""
        source = source.absolute()
        return cls(
            source=source,
            output=output_dir.absolute() / derive_output_name(source),
            category=classify_path(source),
        )


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a conversion.

    ``success`` is also true for degraded outputs (e.g. a placeholder image);
    ``degraded`` and the message disclose that case.
    """

    success: bool
    message: str
    output_path: Path | None = None
    degraded: bool = False

    @classmethod
    def ok(cls, output_path: Path, message: str, degraded: bool = False) -> ConversionResult:
        return cls(success=True, message=message, output_path=output_path, degraded=degraded)

    @classmethod
    def failed(cls, message: str) -> ConversionResult:
        return cls(success=False, message=message)
