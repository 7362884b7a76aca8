"""Conversion orchestration: tool discovery, classification, dispatch and reporting."""
