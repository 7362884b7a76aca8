"""External tool discovery.

Resolves the conversion engines once per session into an immutable
``ToolAvailability`` snapshot. Each tool is searched on PATH first, then in the
install directory named by its environment variable. A missing tool is a
normal state, never an error.
"""

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from jpegit.config.constants import (
    EXIFTOOL_BINARIES,
    EXIFTOOL_ENV,
    FFMPEG_BINARIES,
    FFMPEG_ENV,
    GHOSTSCRIPT_BINARIES,
    GHOSTSCRIPT_ENV,
    IMAGEMAGICK_BINARIES,
    IMAGEMAGICK_ENV,
    INSTALL_SUBDIRS,
    LIBREOFFICE_BINARIES,
    LIBREOFFICE_ENV,
    LIBREOFFICE_INSTALL_SUBDIRS,
)
from jpegit.exceptions import ToolNotFoundError
from jpegit.utils.logging import get_logger

log = get_logger(__name__)


class Tool(str, Enum):
    """External programs jpegit can drive."""

    FFMPEG = "ffmpeg"
    IMAGEMAGICK = "imagemagick"
    GHOSTSCRIPT = "ghostscript"
    EXIFTOOL = "exiftool"
    LIBREOFFICE = "libreoffice"


class DiscoverySource(str, Enum):
    """How a tool was found."""

    PATH = "path"
    ENV = "env"
    ABSENT = "absent"


@dataclass(frozen=True)
class ToolSpec:
    """Static description of how to find a tool."""

    tool: Tool
    display_name: str
    binaries: tuple[str, ...]
    env_var: str
    install_subdirs: tuple[str, ...] = INSTALL_SUBDIRS
    homepage: str = ""

    @property
    def install_hint(self) -> str:
        """Remediation text shown when the tool is missing."""
        return (
            f"Install {self.display_name} ({self.homepage}) and make sure "
            f"'{self.binaries[0]}' is on PATH, or set {self.env_var} to its install directory."
        )


TOOL_SPECS: dict[Tool, ToolSpec] = {
    Tool.FFMPEG: ToolSpec(
        tool=Tool.FFMPEG,
        display_name="ffmpeg",
        binaries=FFMPEG_BINARIES,
        env_var=FFMPEG_ENV,
        homepage="https://ffmpeg.org",
    ),
    Tool.IMAGEMAGICK: ToolSpec(
        tool=Tool.IMAGEMAGICK,
        display_name="ImageMagick",
        binaries=IMAGEMAGICK_BINARIES,
        env_var=IMAGEMAGICK_ENV,
        homepage="https://imagemagick.org",
    ),
    Tool.GHOSTSCRIPT: ToolSpec(
        tool=Tool.GHOSTSCRIPT,
        display_name="Ghostscript",
        binaries=GHOSTSCRIPT_BINARIES,
        env_var=GHOSTSCRIPT_ENV,
        homepage="https://ghostscript.com",
    ),
    Tool.EXIFTOOL: ToolSpec(
        tool=Tool.EXIFTOOL,
        display_name="ExifTool",
        binaries=EXIFTOOL_BINARIES,
        env_var=EXIFTOOL_ENV,
        homepage="https://exiftool.org",
    ),
    Tool.LIBREOFFICE: ToolSpec(
        tool=Tool.LIBREOFFICE,
        display_name="LibreOffice",
        binaries=LIBREOFFICE_BINARIES,
        env_var=LIBREOFFICE_ENV,
        install_subdirs=LIBREOFFICE_INSTALL_SUBDIRS,
        homepage="https://www.libreoffice.org",
    ),
}


@dataclass(frozen=True)
class ToolLocation:
    """Where a tool was found, if at all."""

    tool: Tool
    path: Path | None = None
    source: DiscoverySource = DiscoverySource.ABSENT

    @property
    def available(self) -> bool:
        return self.path is not None


def _absent(tool: Tool) -> ToolLocation:
    return ToolLocation(tool=tool)


@dataclass(frozen=True)
class ToolAvailability:
    """Immutable per-session snapshot of installed tools."""

    ffmpeg: ToolLocation = field(default_factory=lambda: _absent(Tool.FFMPEG))
    imagemagick: ToolLocation = field(default_factory=lambda: _absent(Tool.IMAGEMAGICK))
    ghostscript: ToolLocation = field(default_factory=lambda: _absent(Tool.GHOSTSCRIPT))
    exiftool: ToolLocation = field(default_factory=lambda: _absent(Tool.EXIFTOOL))
    libreoffice: ToolLocation = field(default_factory=lambda: _absent(Tool.LIBREOFFICE))

    @classmethod
    def from_paths(cls, **paths: str | Path | None) -> ToolAvailability:
        """Build a snapshot from explicit paths, keyed by tool name.

        Example:
            >>> ToolAvailability.from_paths(imagemagick="/usr/bin/magick")
        """
        locations: dict[str, ToolLocation] = {}
        for name, path in paths.items():
            tool = Tool(name)
            if path is None:
                locations[name] = _absent(tool)
            else:
                locations[name] = ToolLocation(tool, Path(path), DiscoverySource.PATH)
        return cls(**locations)

    def get(self, tool: Tool) -> ToolLocation:
        return getattr(self, tool.value)

    def path_for(self, tool: Tool) -> Path | None:
        return self.get(tool).path

    def has(self, tool: Tool) -> bool:
        return self.get(tool).available

    def require(self, tool: Tool, file_path: Path) -> Path:
        """Return the tool path or raise ToolNotFoundError with an install hint."""
        path = self.path_for(tool)
        if path is None:
            spec = TOOL_SPECS[tool]
            raise ToolNotFoundError(file_path, spec.display_name, spec.install_hint)
        return path

    def describe(self) -> list[dict[str, Any]]:
        """Rows describing every tool, for display."""
        rows = []
        for tool in Tool:
            location = self.get(tool)
            spec = TOOL_SPECS[tool]
            rows.append(
                {
                    "tool": tool.value,
                    "name": spec.display_name,
                    "available": location.available,
                    "path": str(location.path) if location.path else None,
                    "source": location.source.value,
                    "env_var": spec.env_var,
                }
            )
        return rows


def _is_windows() -> bool:
    return sys.platform == "win32"


def _binary_filename(binary: str) -> str:
    return f"{binary}.exe" if _is_windows() else binary


def _find_on_path(binary: str) -> Path | None:
    found = shutil.which(binary)
    if found and Path(found).exists():
        return Path(found).absolute()
    return None


def _find_in_install_dir(spec: ToolSpec, install_dir: str) -> Path | None:
    base = Path(install_dir).expanduser()
    for binary in spec.binaries:
        filename = _binary_filename(binary)
        for subdir in spec.install_subdirs:
            candidate = base / subdir / filename if subdir else base / filename
            if candidate.is_file():
                return candidate.absolute()
    return None


def resolve_tool(spec: ToolSpec, environ: Mapping[str, str] | None = None) -> ToolLocation:
    """Locate a single tool.

    Search order:
    1. PATH lookup for each binary name, in order
    2. The install directory named by the tool's environment variable

    Args:
        spec: Tool description
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ToolLocation (absent if not found)
    """
    env = os.environ if environ is None else environ

    for binary in spec.binaries:
        path = _find_on_path(binary)
        if path is not None:
            log.debug("Tool found on PATH", tool=spec.tool.value, path=str(path))
            return ToolLocation(spec.tool, path, DiscoverySource.PATH)

    install_dir = env.get(spec.env_var)
    if install_dir:
        path = _find_in_install_dir(spec, install_dir)
        if path is not None:
            log.debug(
                "Tool found via environment",
                tool=spec.tool.value,
                env_var=spec.env_var,
                path=str(path),
            )
            return ToolLocation(spec.tool, path, DiscoverySource.ENV)
        log.debug(
            "Install directory does not contain tool",
            tool=spec.tool.value,
            env_var=spec.env_var,
            directory=install_dir,
        )

    log.debug("Tool not found", tool=spec.tool.value)
    return _absent(spec.tool)


def resolve_tools(environ: Mapping[str, str] | None = None) -> ToolAvailability:
    """Resolve every external tool into a session snapshot.

    Safe to call repeatedly; callers should resolve once per batch and reuse
    the snapshot.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ToolAvailability snapshot
    """
    locations = {tool.value: resolve_tool(spec, environ) for tool, spec in TOOL_SPECS.items()}
    availability = ToolAvailability(**locations)

    log.info(
        "Resolved external tools",
        available=[t.value for t in Tool if availability.has(t)],
        missing=[t.value for t in Tool if not availability.has(t)],
    )
    return availability
