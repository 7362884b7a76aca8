"""Custom exceptions for jpegit."""

from pathlib import Path


class JpegitError(Exception):
    """Base exception class for jpegit."""

    pass


class ConversionError(JpegitError):
    """Error during file conversion."""

    def __init__(self, file_path: Path, message: str, cause: Exception | None = None) -> None:
        self.file_path = file_path
        self.reason = message
        self.cause = cause
        super().__init__(f"Conversion failed for {file_path}: {message}")


class AccessError(ConversionError):
    """Input file is missing, empty, or unreadable."""

    pass


class ToolNotFoundError(ConversionError):
    """A required external tool is not installed."""

    def __init__(self, file_path: Path, tool: str, hint: str) -> None:
        super().__init__(file_path, f"{tool} is not installed. {hint}")
        self.tool = tool
        self.hint = hint


class EngineError(ConversionError):
    """An external tool ran but failed or produced no output."""

    def __init__(
        self,
        file_path: Path,
        tool: str,
        diagnostics: str,
        returncode: int | None = None,
    ) -> None:
        detail = diagnostics or f"exit status {returncode}"
        super().__init__(file_path, f"{tool} failed: {detail}")
        self.tool = tool
        self.diagnostics = diagnostics
        self.returncode = returncode


class ConfigurationError(JpegitError):
    """Configuration error."""

    pass
