"""Configuration for jpegit."""

from jpegit.config.settings import JpegitSettings, get_settings, reload_settings

__all__ = ["JpegitSettings", "get_settings", "reload_settings"]
