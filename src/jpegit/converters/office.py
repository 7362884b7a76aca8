"""Office document conversion.

Documents are exported to an intermediate PDF with LibreOffice and then
rendered by the PDF strategy. The intermediate PDF lives in a scratch
directory that is always removed afterwards.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from jpegit.converters.base import BaseStrategy
from jpegit.converters.pdf import PdfStrategy
from jpegit.core.classifier import FileCategory
from jpegit.core.models import ConversionResult
from jpegit.core.tools import TOOL_SPECS, Tool
from jpegit.utils.logging import get_logger
from jpegit.utils.process import run_tool

if TYPE_CHECKING:
    from jpegit.config.settings import JpegitSettings
    from jpegit.core.tools import ToolAvailability

log = get_logger(__name__)

REQUIREMENT_MESSAGE = "Office conversion requires LibreOffice, an optional dependency."


class OfficeStrategy(BaseStrategy):
    """Export with LibreOffice to PDF, then render the first page."""

    name = "office"
    category = FileCategory.OFFICE

    def __init__(
        self,
        settings: JpegitSettings | None = None,
        pdf_strategy: PdfStrategy | None = None,
    ) -> None:
        super().__init__(settings)
        self.pdf_strategy = pdf_strategy or PdfStrategy(self.settings)

    def convert(self, source: Path, output: Path, tools: ToolAvailability) -> ConversionResult:
        soffice = tools.path_for(Tool.LIBREOFFICE)
        if soffice is None:
            hint = TOOL_SPECS[Tool.LIBREOFFICE].install_hint
            return ConversionResult.failed(f"{REQUIREMENT_MESSAGE} {hint}")

        with tempfile.TemporaryDirectory(prefix="jpegit-office-") as scratch:
            scratch_dir = Path(scratch)
            pdf_path, error = self._export_pdf(soffice, source, scratch_dir)

            if pdf_path is None:
                return ConversionResult.failed(
                    f"LibreOffice could not export the document to PDF: {error}. "
                    f"{REQUIREMENT_MESSAGE}"
                )

            result = self.pdf_strategy.render(pdf_path, output, tools, label=source.name)

        log.debug("Removed intermediate PDF", scratch=scratch)

        if not result.success:
            return result
        return ConversionResult.ok(
            output,
            f"Exported with LibreOffice; {result.message}",
            degraded=result.degraded,
        )

    def _export_pdf(
        self, soffice: Path, source: Path, scratch_dir: Path
    ) -> tuple[Path | None, str]:
        """Convert the document to PDF inside ``scratch_dir``.

        An isolated user profile lets concurrent LibreOffice instances run
        without lock conflicts.

        Returns:
            (pdf path or None, diagnostics)
        """
        profile_dir = scratch_dir / "profile"
        out_dir = scratch_dir / "out"
        profile_dir.mkdir()
        out_dir.mkdir()

        run = run_tool(
            [
                soffice,
                "--headless",
                f"-env:UserInstallation={profile_dir.as_uri()}",
                "--convert-to",
                "pdf",
                "--outdir",
                out_dir,
                source,
            ],
            timeout=self.timeout,
        )

        if not run.ok:
            return None, run.diagnostics

        pdf_path = out_dir / f"{source.stem}.pdf"
        if not pdf_path.exists():
            # LibreOffice might use different naming
            pdf_path = next(out_dir.glob("*.pdf"), pdf_path)
        if not pdf_path.exists():
            return None, run.diagnostics or "no PDF was produced"

        log.debug("Exported intermediate PDF", pdf=str(pdf_path))
        return pdf_path, ""
