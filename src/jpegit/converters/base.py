"""Base conversion strategy interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.config import get_settings
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.exceptions import EngineError, ToolNotFoundError
from jpegit.utils.fs import output_exists, remove_quietly
from jpegit.utils.logging import get_logger
from jpegit.utils.process import ToolRun, run_tool

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)


class BaseStrategy(ABC):
    """Abstract base class for per-category conversion strategies.

    Subclasses implement ``convert`` and may raise ``ToolNotFoundError`` or
    ``EngineError``; ``run`` turns those into failed results so a strategy
    always answers with a ``ConversionResult``.
    """

    name: str = "base"
    category: FileCategory = FileCategory.UNKNOWN

    def __init__(self, settings: JpegitSettings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def timeout(self) -> int | None:
        return self.settings.tools.effective_timeout

    def run(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        """Convert ``source`` into the JPEG at ``output``.

        Args:
            source: Input file
            output: Target JPEG path
            tools: Session tool snapshot

        Returns:
            ConversionResult
        """
        try:
            return self.convert(source, output, tools)
        except ToolNotFoundError as e:
            log.warning("Required tool missing", strategy=self.name, tool=e.tool)
            return ConversionResult.failed(e.reason)
        except EngineError as e:
            log.warning("Engine failed", strategy=self.name, tool=e.tool, error=e.diagnostics)
            return ConversionResult.failed(e.reason)

    @abstractmethod
    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        """Perform the conversion."""
        pass

    def invoke(
        self,
        tool_name: str,
        args: Sequence[str | Path],
        source: Path,
        output: Path,
    ) -> ToolRun:
        """Run a tool that must write ``output``.

        Any stale file at ``output`` is removed first, so success is judged on
        exit status and a freshly written, non-empty output file.

        Raises:
            EngineError: If the tool fails or writes nothing
        """
        remove_quietly(output)
        run = run_tool(args, timeout=self.timeout)

        if not run.ok:
            raise EngineError(source, tool_name, run.diagnostics, run.returncode)
        if not output_exists(output):
            detail = "no output file was produced"
            if run.diagnostics:
                detail = f"{detail} ({run.diagnostics})"
            raise EngineError(source, tool_name, detail, run.returncode)

        return run
