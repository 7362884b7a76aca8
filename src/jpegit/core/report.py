"""Per-session result accumulation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from jpegit.config.constants import NO_OUTPUT_SENTINEL
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult


class EntryStatus(str, Enum):
    SUCCESS = "Success"
    FAILED = "Failed"


@dataclass(frozen=True)
class ReportEntry:
    """Result of processing one input file."""

    source: str
    category: FileCategory
    output: str
    status: EntryStatus
    message: str
    output_path: Path | None = None
    degraded: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status is EntryStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        data["status"] = self.status.value
        data["output_path"] = str(self.output_path) if self.output_path else None
        return data


@dataclass
class SessionReport:
    """Append-only, ordered record of every file offered to the dispatcher."""

    entries: list[ReportEntry] = field(default_factory=list)

    def record(self, source: Path, category: FileCategory, result: ConversionResult) -> ReportEntry:
        """Append the outcome for one file.

        Args:
            source: Input file path
            category: Category the file was classified as
            result: Conversion outcome

        Returns:
            The appended entry
        """
        output_path = result.output_path if result.success else None
        entry = ReportEntry(
            source=source.name,
            category=category,
            output=output_path.name if output_path else NO_OUTPUT_SENTINEL,
            status=EntryStatus.SUCCESS if result.success else EntryStatus.FAILED,
            message=result.message,
            output_path=output_path,
            degraded=result.success and result.degraded,
        )
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def success_count(self) -> int:
        return sum(1 for e in self.entries if e.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.entries) - self.success_count

    @property
    def degraded_count(self) -> int:
        return sum(1 for e in self.entries if e.degraded)

    def successful_outputs(self) -> list[Path]:
        """Produced JPEGs in processing order."""
        return [e.output_path for e in self.entries if e.succeeded and e.output_path]

    def to_dicts(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.entries]
