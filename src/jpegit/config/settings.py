"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from jpegit.config.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_FFMPEG_QUALITY,
    DEFAULT_FRAME_OFFSET,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LOG_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PDF_DPI,
    DEFAULT_PLACEHOLDER_HEIGHT,
    DEFAULT_PLACEHOLDER_WIDTH,
    DEFAULT_TOOL_TIMEOUT,
    DEFAULT_WAVEFORM_HEIGHT,
    DEFAULT_WAVEFORM_WIDTH,
)
from jpegit.exceptions import ConfigurationError


class ToolsConfig(BaseModel):
    """External tool invocation configuration."""

    timeout: int = Field(default=DEFAULT_TOOL_TIMEOUT, ge=0)  # 0 disables the timeout

    @property
    def effective_timeout(self) -> int | None:
        """Timeout in seconds for subprocess calls, or None for no limit."""
        return self.timeout or None


class ImageConfig(BaseModel):
    """Image conversion configuration."""

    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=1, le=100)
    copy_metadata: bool = True


class PDFConfig(BaseModel):
    """PDF rendering configuration."""

    dpi: int = Field(default=DEFAULT_PDF_DPI, ge=36, le=1200)
    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=1, le=100)
    placeholder_width: int = Field(default=DEFAULT_PLACEHOLDER_WIDTH, ge=100)
    placeholder_height: int = Field(default=DEFAULT_PLACEHOLDER_HEIGHT, ge=100)


class VideoConfig(BaseModel):
    """Video frame extraction configuration."""

    frame_offset: float = Field(default=DEFAULT_FRAME_OFFSET, ge=0)
    ffmpeg_quality: int = Field(default=DEFAULT_FFMPEG_QUALITY, ge=1, le=31)


class AudioConfig(BaseModel):
    """Audio waveform rendering configuration."""

    waveform_width: int = Field(default=DEFAULT_WAVEFORM_WIDTH, ge=16)
    waveform_height: int = Field(default=DEFAULT_WAVEFORM_HEIGHT, ge=16)


class CombineConfig(BaseModel):
    """Image combination configuration."""

    direction: Literal["vertical", "horizontal"] = "vertical"
    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=1, le=100)


class OutputConfig(BaseModel):
    """Output configuration."""

    default_dir: str = DEFAULT_OUTPUT_DIR


class JpegitSettings(BaseSettings):
    """Main configuration class for jpegit."""

    model_config = SettingsConfigDict(
        env_prefix="JPEGIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    pdf: PDFConfig = Field(default_factory=PDFConfig)
    video: VideoConfig = Field(default_factory=VideoConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    combine: CombineConfig = Field(default_factory=CombineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR
    log_format: Literal["console", "json"] = "console"

    def get_output_dir(self, base_path: Path | None = None) -> Path:
        """Get the output directory path."""
        if base_path:
            return base_path / self.output.default_dir
        return Path(self.output.default_dir)


@lru_cache
def get_settings() -> JpegitSettings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If the environment or jpegit.yaml holds invalid values
    """
    try:
        return JpegitSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def reload_settings() -> JpegitSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
