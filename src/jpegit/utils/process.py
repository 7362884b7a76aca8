"""Child-process execution for external conversion tools.

Tools are always invoked with an argument vector (never through a shell), with
stdout/stderr captured and an optional timeout.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from jpegit.config.constants import MAX_DIAGNOSTIC_LENGTH
from jpegit.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ToolRun:
    """Outcome of a single external tool invocation."""

    args: tuple[str, ...]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    timeout: int | None = None

    @property
    def ok(self) -> bool:
        """True if the process exited with status 0."""
        return self.returncode == 0 and not self.timed_out

    @property
    def diagnostics(self) -> str:
        """Trimmed diagnostic text: stderr, falling back to stdout."""
        if self.timed_out:
            return f"{Path(self.args[0]).name} timed out after {self.timeout}s"

        text = (self.stderr or self.stdout).strip()
        if not text and self.returncode not in (0, None):
            return f"exit status {self.returncode}"
        if len(text) > MAX_DIAGNOSTIC_LENGTH:
            return "..." + text[-MAX_DIAGNOSTIC_LENGTH:]
        return text


def run_tool(
    args: Sequence[str | Path],
    timeout: int | None = None,
    cwd: Path | None = None,
) -> ToolRun:
    """Run an external tool and capture its outcome.

    Launch failures and timeouts are reported through the returned
    ``ToolRun`` rather than raised, so callers only have to inspect one shape.

    Args:
        args: Executable path followed by its arguments
        timeout: Seconds before the process is killed (None = wait forever)
        cwd: Optional working directory

    Returns:
        ToolRun describing exit status and captured output
    """
    argv = tuple(str(a) for a in args)
    log.debug("Running tool", command=argv[0], args=" ".join(argv[1:]))

    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            cwd=cwd,
            check=False,
        )
    except subprocess.TimeoutExpired:
        log.warning("Tool timed out", command=argv[0], timeout=timeout)
        return ToolRun(args=argv, returncode=None, timed_out=True, timeout=timeout)
    except OSError as e:
        log.warning("Tool could not be started", command=argv[0], error=str(e))
        return ToolRun(args=argv, returncode=None, stderr=f"could not start {argv[0]}: {e}")

    run = ToolRun(
        args=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        timeout=timeout,
    )
    if not run.ok:
        log.debug("Tool exited with error", command=argv[0], returncode=run.returncode)
    return run
