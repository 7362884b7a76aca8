"""Constants for jpegit."""

# Application constants
APP_NAME = "jpegit"

# Default paths
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "jpegit.yaml"

# Output naming
OUTPUT_SUFFIX = ".jpg"
NO_OUTPUT_SENTINEL = "none"
COMBINED_PREFIX = "combined"

# Extension -> category name (lowercase, with leading dot)
IMAGE_EXTENSIONS = {
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".tif",
    ".tiff",
    ".webp",
    ".heic",
    ".heif",
    ".ico",
    ".svg",
    ".psd",
    # Camera raw
    ".raw",
    ".cr2",
    ".nef",
    ".arw",
    ".dng",
}
PDF_EXTENSIONS = {".pdf"}
VIDEO_EXTENSIONS = {
    ".mp4",
    ".mov",
    ".avi",
    ".mkv",
    ".wmv",
    ".flv",
    ".webm",
    ".m4v",
    ".mpg",
    ".mpeg",
    ".3gp",
}
AUDIO_EXTENSIONS = {
    ".mp3",
    ".wav",
    ".flac",
    ".aac",
    ".ogg",
    ".m4a",
    ".wma",
    ".opus",
    ".aiff",
}
OFFICE_EXTENSIONS = {
    ".doc",
    ".docx",
    ".xls",
    ".xlsx",
    ".ppt",
    ".pptx",
    ".odt",
    ".ods",
    ".odp",
    ".rtf",
}

# External tools: binary candidates (in search order) and install-dir override
FFMPEG_BINARIES = ("ffmpeg",)
IMAGEMAGICK_BINARIES = ("magick",)
GHOSTSCRIPT_BINARIES = ("gs", "gswin64c", "gswin32c")
EXIFTOOL_BINARIES = ("exiftool",)
LIBREOFFICE_BINARIES = ("soffice", "libreoffice")

FFMPEG_ENV = "FFMPEG_HOME"
IMAGEMAGICK_ENV = "IMAGEMAGICK_HOME"
GHOSTSCRIPT_ENV = "GHOSTSCRIPT_HOME"
EXIFTOOL_ENV = "EXIFTOOL_HOME"
LIBREOFFICE_ENV = "LIBREOFFICE_HOME"

# Subdirectories of an install dir probed for the binary, in order
INSTALL_SUBDIRS = ("", "bin")
LIBREOFFICE_INSTALL_SUBDIRS = ("", "bin", "program")

# Conversion defaults
DEFAULT_TOOL_TIMEOUT = 300
DEFAULT_JPEG_QUALITY = 95
DEFAULT_PDF_DPI = 150
DEFAULT_PLACEHOLDER_WIDTH = 800
DEFAULT_PLACEHOLDER_HEIGHT = 1000
DEFAULT_PLACEHOLDER_COLOR = (224, 224, 224)
DEFAULT_PLACEHOLDER_TEXT_COLOR = (64, 64, 64)
DEFAULT_FRAME_OFFSET = 3.0
DEFAULT_FFMPEG_QUALITY = 2
DEFAULT_WAVEFORM_WIDTH = 1280
DEFAULT_WAVEFORM_HEIGHT = 480

# Engine diagnostics kept in result messages (tail, in characters)
MAX_DIAGNOSTIC_LENGTH = 500
