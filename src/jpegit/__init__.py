"""jpegit - normalize mixed media files into JPEG previews."""

__version__ = "0.1.0"
