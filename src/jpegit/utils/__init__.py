"""Utility helpers for jpegit."""
