"""Per-file routing: classification, access checks, strategy selection."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.converters import build_strategies
from jpegit.core.classifier import FileCategory, classify_path
from jpegit.core.models import ConversionRequest, ConversionResult
from jpegit.core.report import SessionReport
from jpegit.exceptions import AccessError
from jpegit.utils.fs import check_readable
from jpegit.utils.logging import file_context, get_logger

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.converters.base import BaseStrategy
    from jpegit.core.report import ReportEntry
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)

UNSUPPORTED_MESSAGE = "unsupported file type"


class ConversionDispatcher:
    """Routes files to the strategy for their category and records every outcome.

    One file's failure never stops the batch: access problems, missing tools,
    engine failures and unexpected exceptions all end as a failed entry in the
    report.
    """

    def __init__(
        self,
        tools: ToolAvailability,
        output_dir: Path,
        report: SessionReport | None = None,
        strategies: Mapping[FileCategory, BaseStrategy] | None = None,
        settings: JpegitSettings | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            tools: Tool snapshot shared by every conversion in the session
            output_dir: Existing directory receiving the JPEGs
            report: Accumulator to append to (a new one is created if omitted)
            strategies: Category -> strategy table (defaults to build_strategies)
            settings: Settings used to build the default strategies
        """
        self.tools = tools
        self.output_dir = Path(output_dir)
        self.report = report if report is not None else SessionReport()
        self.strategies = strategies if strategies is not None else build_strategies(settings)
        self._claimed_outputs: set[Path] = set()

    def process_one(self, path: str | Path) -> ConversionResult:
        """Convert one file and append its entry to the report.

        Args:
            path: Input file

        Returns:
            The recorded ConversionResult
        """
        source = Path(path)
        category = classify_path(source)

        with file_context(source):
            try:
                request = ConversionRequest.for_file(source, self.output_dir)
                result = self._dispatch(request)
            except Exception as e:
                log.error("Unexpected conversion error", exc_info=True)
                result = ConversionResult.failed(f"unexpected error: {e}")

        self.report.record(source, category, result)
        return result

    def process_batch(
        self,
        paths: Iterable[str | Path],
        on_progress: Callable[[ReportEntry], None] | None = None,
    ) -> SessionReport:
        """Convert files sequentially, in the given order.

        Args:
            paths: Input files
            on_progress: Called with each new report entry as it is recorded
        """
        for path in paths:
            self.process_one(path)
            if on_progress is not None:
                on_progress(self.report.entries[-1])
        return self.report

    def _dispatch(self, request: ConversionRequest) -> ConversionResult:
        try:
            check_readable(request.source)
        except AccessError as e:
            log.warning("File not accessible", reason=e.reason)
            return ConversionResult.failed(e.reason)

        strategy = self.strategies.get(request.category)
        if strategy is None:
            log.warning("Unsupported file type", extension=request.source.suffix)
            return ConversionResult.failed(UNSUPPORTED_MESSAGE)

        if request.output in self._claimed_outputs:
            log.warning("Output path already used in this session", output=request.output.name)
        self._claimed_outputs.add(request.output)

        log.info("Converting", category=request.category.value, output=request.output.name)
        result = strategy.run(request.source, request.output, self.tools)

        if result.success:
            log.info("Converted", message=result.message, degraded=result.degraded)
        else:
            log.warning("Conversion failed", message=result.message)
        return result
