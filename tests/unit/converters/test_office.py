"""Tests for the Office strategy."""

import tempfile
from pathlib import Path

import pytest

from jpegit.converters.office import REQUIREMENT_MESSAGE, OfficeStrategy
from jpegit.converters.pdf import PdfStrategy, PdfTier, TierAttempt
from jpegit.core.models import ConversionResult
from jpegit.core.tools import ToolAvailability


class RecordingPdfStrategy(PdfStrategy):
    """PDF strategy that records what it was asked to render."""

    def __init__(self, settings, result=None):
        super().__init__(settings)
        self.rendered: list[tuple[Path, bool, str]] = []
        self.result = result

    def render(self, source, output, tools, label=None):
        self.rendered.append((source, source.exists(), label))
        if self.result is not None:
            return self.result
        output.write_bytes(b"jpeg")
        return ConversionResult.ok(output, "Rendered first page with Ghostscript")


@pytest.fixture
def source(make_file):
    return make_file("Quarterly Report.docx")


class TestOfficeStrategy:
    """Tests for OfficeStrategy."""

    def test_libreoffice_missing(self, source, output_dir, settings):
        """Test that a missing LibreOffice is named as an optional dependency."""
        result = OfficeStrategy(settings).run(source, output_dir / "q.jpg", ToolAvailability())

        assert not result.success
        assert result.message.startswith(REQUIREMENT_MESSAGE)
        assert "LIBREOFFICE_HOME" in result.message

    def test_export_then_render(self, fake_tool, source, output_dir, settings):
        """Test that the intermediate PDF is rendered and then cleaned up."""
        soffice = fake_tool("soffice")
        pdf = RecordingPdfStrategy(settings)
        output = output_dir / "Quarterly_Report_docx.jpg"

        result = OfficeStrategy(settings, pdf_strategy=pdf).run(
            source, output, ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert result.success
        assert result.message == "Exported with LibreOffice; Rendered first page with Ghostscript"

        intermediate, existed, label = pdf.rendered[0]
        assert existed
        assert intermediate.name == "Quarterly Report.pdf"
        assert label == "Quarterly Report.docx"
        assert not intermediate.exists()
        assert not intermediate.parent.parent.exists()

    def test_headless_arguments(self, fake_tool, source, output_dir, settings):
        """Test that LibreOffice runs headless with an isolated profile."""
        soffice = fake_tool("soffice")

        OfficeStrategy(settings, pdf_strategy=RecordingPdfStrategy(settings)).run(
            source, output_dir / "q.jpg", ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        args = soffice.calls[0]
        assert "--headless" in args
        assert args[args.index("--convert-to") + 1] == "pdf"
        assert any(a.startswith("-env:UserInstallation=file://") for a in args)
        assert args[-1] == str(source)
        assert Path(args[args.index("--outdir") + 1]).parent.name.startswith("jpegit-office-")

    def test_export_failure(self, fake_tool, source, output_dir, settings):
        """Test that a failed export is reported without rendering."""
        soffice = fake_tool("soffice", mode="fail")
        pdf = RecordingPdfStrategy(settings)

        result = OfficeStrategy(settings, pdf_strategy=pdf).run(
            source, output_dir / "q.jpg", ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert not result.success
        assert "LibreOffice could not export the document to PDF" in result.message
        assert "simulated soffice failure" in result.message
        assert result.message.endswith(REQUIREMENT_MESSAGE)
        assert pdf.rendered == []

    def test_export_without_pdf(self, fake_tool, source, output_dir, settings):
        """Test that a zero exit without a PDF is a failure."""
        soffice = fake_tool("soffice", mode="noop")

        result = OfficeStrategy(settings, pdf_strategy=RecordingPdfStrategy(settings)).run(
            source, output_dir / "q.jpg", ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert not result.success
        assert "no PDF was produced" in result.message

    def test_degraded_render_is_propagated(self, fake_tool, source, output_dir, settings):
        """Test that a placeholder render keeps the degraded flag."""
        soffice = fake_tool("soffice")
        output = output_dir / "q.jpg"
        pdf = PdfStrategy(
            settings,
            tiers=[
                PdfTier("placeholder", _write_placeholder, "Placeholder generated", degraded=True)
            ],
        )

        result = OfficeStrategy(settings, pdf_strategy=pdf).run(
            source, output, ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert result.success
        assert result.degraded
        assert result.message == "Exported with LibreOffice; Placeholder generated"

    def test_render_failure_is_returned(self, fake_tool, source, output_dir, settings):
        """Test that a PDF render failure is passed through."""
        soffice = fake_tool("soffice")
        failure = ConversionResult.failed("PDF conversion failed.")
        pdf = RecordingPdfStrategy(settings, result=failure)

        result = OfficeStrategy(settings, pdf_strategy=pdf).run(
            source, output_dir / "q.jpg", ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert not result.success
        assert result.message == "PDF conversion failed."

    def test_scratch_removed_on_failure(self, fake_tool, source, output_dir, settings):
        """Test that no scratch directories are left behind."""
        soffice = fake_tool("soffice", mode="fail")
        before = set(Path(tempfile.gettempdir()).glob("jpegit-office-*"))

        OfficeStrategy(settings).run(
            source, output_dir / "q.jpg", ToolAvailability.from_paths(libreoffice=soffice.path)
        )

        assert set(Path(tempfile.gettempdir()).glob("jpegit-office-*")) == before


def _write_placeholder(source, output, tools, label):
    output.write_bytes(b"placeholder")
    return TierAttempt(True)
