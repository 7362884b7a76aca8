"""CLI package for jpegit."""
