"""Tests for the PDF strategy and its fallback chain."""

from unittest.mock import patch

import pytest
from PIL import Image

from jpegit.converters.pdf import (
    PLACEHOLDER_NOTE,
    PdfStrategy,
    PdfTier,
    TierAttempt,
    create_placeholder,
)
from jpegit.core.tools import ToolAvailability


@pytest.fixture
def source(make_file):
    return make_file("report.pdf", b"%PDF-1.4 test content")


class TestPdfStrategy:
    """Tests for PdfStrategy tiers."""

    def test_ghostscript_first(self, fake_tool, source, output_dir, settings):
        """Test that Ghostscript is used when it succeeds, and ImageMagick is not tried."""
        gs = fake_tool("gs")
        magick = fake_tool("magick")
        tools = ToolAvailability.from_paths(ghostscript=gs.path, imagemagick=magick.path)
        output = output_dir / "report_pdf.jpg"

        result = PdfStrategy(settings).run(source, output, tools)

        assert result.success
        assert not result.degraded
        assert result.message == "Rendered first page with Ghostscript"
        assert magick.calls == []

        args = gs.calls[0]
        assert "-sDEVICE=jpeg" in args
        assert "-dFirstPage=1" in args
        assert "-dLastPage=1" in args
        assert f"-sOutputFile={output}" in args
        assert args[-1] == str(source)

    def test_imagemagick_when_ghostscript_fails(self, fake_tool, source, output_dir, settings):
        """Test the second tier after a Ghostscript failure."""
        gs = fake_tool("gs", mode="fail")
        magick = fake_tool("magick")
        tools = ToolAvailability.from_paths(ghostscript=gs.path, imagemagick=magick.path)

        result = PdfStrategy(settings).run(source, output_dir / "r.jpg", tools)

        assert result.success
        assert result.message == "Rendered first page with ImageMagick"
        assert len(gs.calls) == 1
        assert f"{source}[0]" in magick.calls[0]
        assert "-flatten" in magick.calls[0]

    def test_imagemagick_when_ghostscript_absent(self, fake_tool, source, output_dir, settings):
        """Test that an absent Ghostscript is skipped."""
        tools = ToolAvailability.from_paths(imagemagick=fake_tool("magick").path)

        result = PdfStrategy(settings).run(source, output_dir / "r.jpg", tools)

        assert result.message == "Rendered first page with ImageMagick"

    def test_placeholder_when_all_renderers_fail(self, fake_tool, source, output_dir, settings):
        """Test that failing renderers degrade to a placeholder marked as success."""
        tools = ToolAvailability.from_paths(
            ghostscript=fake_tool("gs", mode="fail").path,
            imagemagick=fake_tool("magick", mode="noop").path,
        )
        output = output_dir / "report_pdf.jpg"

        result = PdfStrategy(settings).run(source, output, tools)

        assert result.success
        assert result.degraded
        assert "Placeholder generated" in result.message
        assert "Ghostscript" in result.message
        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.size == (
                settings.pdf.placeholder_width,
                settings.pdf.placeholder_height,
            )

    def test_placeholder_with_no_tools(self, source, output_dir, settings):
        """Test that a PDF still yields a placeholder with nothing installed."""
        result = PdfStrategy(settings).run(source, output_dir / "r.jpg", ToolAvailability())

        assert result.success
        assert result.degraded

    def test_all_tiers_fail(self, fake_tool, source, output_dir, settings):
        """Test the failure message when even the placeholder cannot be written."""
        tools = ToolAvailability.from_paths(ghostscript=fake_tool("gs", mode="fail").path)

        with patch(
            "jpegit.converters.pdf.create_placeholder", side_effect=OSError("disk full")
        ):
            result = PdfStrategy(settings).run(source, output_dir / "r.jpg", tools)

        assert not result.success
        assert result.message.startswith("PDF conversion failed.")
        assert "Ghostscript: simulated gs failure" in result.message
        assert "ImageMagick: not installed" in result.message
        assert "placeholder: could not write placeholder: disk full" in result.message

    def test_stale_output_removed_between_tiers(self, fake_tool, source, output_dir, settings):
        """Test that a stale file does not make a failed tier look successful."""
        output = output_dir / "r.jpg"
        output.write_bytes(b"stale")
        tiers = [
            PdfTier("first", lambda s, o, t, label: TierAttempt(True), "first ok"),
            PdfTier("second", lambda s, o, t, label: TierAttempt(False, "nope"), "second ok"),
        ]

        result = PdfStrategy(settings, tiers=tiers).run(source, output, ToolAvailability())

        assert not result.success
        assert "first: no output file was produced" in result.message
        assert "second: nope" in result.message

    def test_render_label(self, source, output_dir, settings):
        """Test that render passes the label through to the tier."""
        labels = []

        def tier(s, o, t, label):
            labels.append(label)
            o.write_bytes(b"jpeg")
            return TierAttempt(True)

        strategy = PdfStrategy(settings, tiers=[PdfTier("only", tier, "done")])
        result = strategy.render(
            source, output_dir / "r.jpg", ToolAvailability(), label="deck.pptx"
        )

        assert result.success
        assert labels == ["deck.pptx"]


class TestCreatePlaceholder:
    """Tests for create_placeholder function."""

    def test_writes_jpeg(self, output_dir):
        """Test that a JPEG of the requested size is written."""
        output = output_dir / "p.jpg"

        create_placeholder(output, "report.pdf", size=(400, 500), quality=80)

        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.size == (400, 500)

    def test_non_latin_label(self, output_dir):
        """Test that labels outside Latin-1 do not break rendering."""
        output = output_dir / "p.jpg"

        create_placeholder(
            output, "报告 ✓.pdf", size=(400, 500), quality=80, note=PLACEHOLDER_NOTE
        )

        assert output.stat().st_size > 0

    def test_unwritable_target(self, tmp_path):
        """Test that an unwritable location raises OSError."""
        with pytest.raises(OSError):
            create_placeholder(tmp_path / "missing" / "p.jpg", "x.pdf", (200, 200), 80)
