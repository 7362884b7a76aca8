"""Pytest configuration and fixtures."""

import stat
import sys
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from jpegit.config.settings import JpegitSettings, ToolsConfig

# Stand-in for an external engine: records its argv, then writes a fake output
# file where the real tool would (last argument, -sOutputFile=, or --outdir).
FAKE_TOOL_SCRIPT = """#!/bin/sh
for a in "$@"; do printf '%s\\n' "$a"; done >> "{log}"
echo "---" >> "{log}"
mode="{mode}"
if [ "$mode" = "fail" ]; then
  echo "simulated {name} failure" >&2
  exit 3
fi
if [ "$mode" = "noop" ]; then
  exit 0
fi
out=""
outdir=""
prev=""
last=""
for arg in "$@"; do
  case "$arg" in
    -sOutputFile=*) out="${{arg#-sOutputFile=}}" ;;
  esac
  if [ "$prev" = "--outdir" ]; then outdir="$arg"; fi
  prev="$arg"
  last="$arg"
done
if [ -n "$outdir" ]; then
  base="${{last##*/}}"
  out="$outdir/${{base%.*}}.pdf"
fi
if [ -z "$out" ]; then out="$last"; fi
printf 'fake {name} output' > "$out"
exit 0
"""


@dataclass
class FakeTool:
    """An executable shell script standing in for an external tool."""

    name: str
    path: Path
    log: Path

    @property
    def calls(self) -> list[list[str]]:
        """Argument vectors of every invocation, in order."""
        if not self.log.exists():
            return []
        chunks = self.log.read_text(encoding="utf-8").split("---\n")
        return [chunk.splitlines() for chunk in chunks if chunk]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings() -> JpegitSettings:
    """Settings with a short tool timeout."""
    return JpegitSettings(tools=ToolsConfig(timeout=30))


@pytest.fixture
def fake_tool(tmp_path) -> Callable[..., FakeTool]:
    """Factory creating fake tool executables.

    Modes:
        ok: write the output file and exit 0
        fail: print to stderr and exit 3
        noop: exit 0 without writing anything
    """
    if sys.platform == "win32":
        pytest.skip("fake tools are POSIX shell scripts")

    bin_dir = tmp_path / "fake-bin"
    bin_dir.mkdir(exist_ok=True)

    def make(name: str, mode: str = "ok", filename: str | None = None) -> FakeTool:
        path = bin_dir / (filename or name)
        log = bin_dir / f"{path.name}.calls"
        path.write_text(FAKE_TOOL_SCRIPT.format(log=log, mode=mode, name=name), encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeTool(name=name, path=path, log=log)

    return make


@pytest.fixture
def empty_path(monkeypatch, tmp_path):
    """PATH containing only an empty directory, so no real tool is found."""
    empty = tmp_path / "empty-path"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    return empty


@pytest.fixture
def make_file(tmp_path) -> Callable[..., Path]:
    """Factory creating non-empty input files."""
    inputs = tmp_path / "inputs"
    inputs.mkdir(exist_ok=True)

    def make(name: str, content: bytes = b"not really media") -> Path:
        path = inputs / name
        path.write_bytes(content)
        return path

    return make


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Existing output directory."""
    path = tmp_path / "output"
    path.mkdir()
    return path
