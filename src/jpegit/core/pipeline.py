"""Batch conversion session: resolve tools once, convert every file, optionally combine."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.config import get_settings
from jpegit.config.constants import COMBINED_PREFIX, OUTPUT_SUFFIX
from jpegit.core.combiner import CombineDirection, combine_images
from jpegit.core.dispatcher import ConversionDispatcher
from jpegit.core.models import ConversionResult
from jpegit.core.report import SessionReport
from jpegit.core.tools import resolve_tools
from jpegit.utils.logging import get_logger, session_context

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.converters.base import BaseStrategy
    from jpegit.core.classifier import FileCategory
    from jpegit.core.report import ReportEntry
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)


@dataclass
class SessionOutcome:
    """Everything a batch run produced."""

    report: SessionReport
    combined: ConversionResult | None = None

    @property
    def all_succeeded(self) -> bool:
        combined_ok = self.combined is None or self.combined.success
        return self.report.failed_count == 0 and combined_ok


class ConversionSession:
    """One batch run over a flat output directory.

    The tool snapshot is taken once, at construction, and shared by every
    conversion in the session.
    """

    def __init__(
        self,
        output_dir: Path,
        settings: JpegitSettings | None = None,
        tools: ToolAvailability | None = None,
        strategies: dict[FileCategory, BaseStrategy] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            output_dir: Existing, writable directory for produced JPEGs
            settings: Settings (defaults to the cached global settings)
            tools: Pre-resolved tool snapshot (resolved now if omitted)
            strategies: Optional strategy table override
        """
        self.output_dir = Path(output_dir)
        self.settings = settings or get_settings()
        self.tools = tools if tools is not None else resolve_tools()
        self.strategies = strategies

    def run(
        self,
        paths: Sequence[str | Path],
        combine: bool = False,
        direction: CombineDirection | str | None = None,
        on_progress: Callable[[ReportEntry], None] | None = None,
    ) -> SessionOutcome:
        """Convert every path in order, then combine the successful outputs if asked.

        Args:
            paths: Input files, in processing order
            combine: Append successful outputs into one composite JPEG
            direction: Combine axis (defaults to settings.combine.direction)
            on_progress: Called with each report entry as soon as it is recorded

        Returns:
            SessionOutcome with the report and the optional combine result
        """
        with session_context():
            log.info(
                "Starting conversion session",
                files=len(paths),
                output_dir=str(self.output_dir),
            )

            dispatcher = ConversionDispatcher(
                tools=self.tools,
                output_dir=self.output_dir,
                report=SessionReport(),
                strategies=self.strategies,
                settings=self.settings,
            )
            report = dispatcher.process_batch(paths, on_progress=on_progress)

            log.info(
                "Conversion session finished",
                succeeded=report.success_count,
                failed=report.failed_count,
                degraded=report.degraded_count,
            )

            combined = None
            if combine:
                combined = self._combine(report, direction)

        return SessionOutcome(report=report, combined=combined)

    def _combine(
        self, report: SessionReport, direction: CombineDirection | str | None
    ) -> ConversionResult | None:
        produced = report.successful_outputs()
        outputs = list(dict.fromkeys(produced))
        if len(outputs) < len(produced):
            log.warning(
                "Several inputs wrote the same output, combining it once",
                duplicates=len(produced) - len(outputs),
            )

        if len(outputs) < 2:
            log.warning(
                "Skipping combine, fewer than two images were produced", produced=len(outputs)
            )
            return None

        direction = CombineDirection(direction or self.settings.combine.direction)
        output_path = self.output_dir / f"{COMBINED_PREFIX}_{direction.value}{OUTPUT_SUFFIX}"
        result = combine_images(outputs, output_path, direction, self.tools, self.settings)

        if result.success:
            log.info("Combined image written", output=str(output_path))
        else:
            log.warning("Combine failed", message=result.message)
        return result
