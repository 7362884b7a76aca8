"""Tests for logging utilities module."""

import io
import json
import logging

import pytest

from jpegit.utils.logging import (
    SafeStreamHandler,
    _add_separator,
    _filter_event_dict,
    _inject_context,
    create_task_log_path,
    file_context,
    generate_session_id,
    get_logger,
    session_context,
    setup_logging,
    setup_task_logging,
)


class TestSessionContext:
    """Tests for session_context and file_context."""

    def test_session_id_format(self):
        """Test that generated IDs are 8 unique characters."""
        ids = {generate_session_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(len(i) == 8 for i in ids)

    def test_session_context_sets_and_restores(self):
        """Test that the session ID is bound only inside the block."""
        with session_context("abc12345") as session_id:
            assert session_id == "abc12345"
            assert _inject_context(None, "info", {})["session"] == "abc12345"

        assert "session" not in _inject_context(None, "info", {})

    def test_session_context_generates_id(self):
        """Test that an ID is generated when none is given."""
        with session_context() as session_id:
            assert len(session_id) == 8

    def test_restored_on_exception(self):
        """Test that context is reset even when the block raises."""
        with pytest.raises(ValueError), session_context("zzz"):
            raise ValueError("boom")

        assert "session" not in _inject_context(None, "info", {})

    def test_file_context_uses_name(self, tmp_path):
        """Test that only the file name is bound."""
        with file_context(tmp_path / "deep" / "report.pdf"):
            assert _inject_context(None, "info", {})["file"] == "report.pdf"

        assert "file" not in _inject_context(None, "info", {})


class TestInjectContext:
    """Tests for _inject_context processor."""

    def test_injects_session_and_file(self):
        """Test that bound context is added to the event."""
        with session_context("s1"), file_context("clip.mp4"):
            result = _inject_context(None, "info", {"event": "x"})

        assert result["session"] == "s1"
        assert result["file"] == "clip.mp4"

    def test_does_not_overwrite(self):
        """Test that explicit keys win over context."""
        with file_context("clip.mp4"):
            result = _inject_context(None, "info", {"event": "x", "file": "other"})

        assert result["file"] == "other"

    def test_nothing_bound(self):
        """Test that no keys are added outside any context."""
        assert _inject_context(None, "info", {"event": "x"}) == {"event": "x"}


class TestFilterEventDict:
    """Tests for _filter_event_dict processor."""

    def test_truncates_long_string(self):
        """Test that long engine diagnostics are truncated."""
        result = _filter_event_dict(None, "info", {"event": "x", "error": "e" * 2000})

        assert len(result["error"]) < 2000
        assert "2000 chars total" in result["error"]

    def test_binary(self):
        """Test that binary payloads are summarized."""
        result = _filter_event_dict(None, "info", {"event": "x", "data": b"\x00" * 600})

        assert result["data"] == "[BINARY DATA: 600 bytes]"

    def test_short_untouched(self):
        """Test that short values are kept."""
        assert _filter_event_dict(None, "info", {"event": "x", "a": "b"})["a"] == "b"


class TestAddSeparator:
    """Tests for _add_separator processor."""

    def test_with_context(self):
        """Test that a separator is added before context keys."""
        assert _add_separator(None, "info", {"event": "Converted", "file": "a"})["event"] == (
            "Converted |"
        )

    def test_without_context(self):
        """Test that internal keys alone add no separator."""
        result = _add_separator(None, "info", {"event": "Converted", "level": "info"})

        assert result["event"] == "Converted"


class TestSafeStreamHandler:
    """Tests for SafeStreamHandler class."""

    def test_emit_unicode(self):
        """Test emitting a non-ASCII file name."""
        stream = io.StringIO()
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))
        record = logging.LogRecord("test", logging.INFO, "", 0, "照片.jpg", (), None)

        handler.emit(record)

        assert "照片.jpg" in stream.getvalue()


class TestSetupLogging:
    """Tests for setup_logging and task logging."""

    def test_root_level(self):
        """Test that the root logger level is applied."""
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_console_level_override(self):
        """Test that the console handler level can differ from root."""
        setup_logging(level="DEBUG", console_level="WARNING")

        assert logging.getLogger().handlers[0].level == logging.WARNING

    def test_file_logging(self, tmp_path):
        """Test that records reach the log file."""
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(level="INFO", log_file=str(log_file))

        get_logger("jpegit.test").info("Converted file", output="a.jpg")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "Converted file" in content
        assert "a.jpg" in content

    def test_create_task_log_path(self, tmp_path):
        """Test the task log file naming."""
        task_id, path = create_task_log_path(tmp_path / "logs", "convert")

        assert path.parent.exists()
        assert path.name.startswith("convert_")
        assert path.name.endswith(f"_{task_id}.log")

    def test_setup_task_logging_levels(self, tmp_path):
        """Test console WARNING and file DEBUG unless verbose."""
        _, path = setup_task_logging(tmp_path, "convert", verbose=False)

        levels = {type(h).__name__: h.level for h in logging.getLogger().handlers}
        assert levels["SafeStreamHandler"] == logging.WARNING
        assert levels["TimedRotatingFileHandler"] == logging.DEBUG
        assert path.parent == tmp_path

    def test_setup_task_logging_verbose(self, tmp_path):
        """Test that verbose shows DEBUG on the console."""
        setup_task_logging(tmp_path, "convert", verbose=True)

        assert logging.getLogger().handlers[0].level == logging.DEBUG

    def test_setup_task_logging_json(self, tmp_path):
        """Test that JSON format writes one JSON object per record."""
        _, path = setup_task_logging(tmp_path, "convert", json_format=True)

        with file_context("scan.pdf"):
            get_logger("jpegit.test").info("Converted", output="scan_pdf.jpg")
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        converted = [r for r in records if r["event"] == "Converted"]
        assert len(converted) == 1
        assert converted[0]["file"] == "scan.pdf"
        assert converted[0]["output"] == "scan_pdf.jpg"
        assert converted[0]["level"] == "info"
