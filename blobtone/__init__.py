"""Blob halftone: layered, randomized halftone-dot blob graphics."""

__version__ = "0.1.0"
