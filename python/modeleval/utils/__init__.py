"""Utility helpers for modeleval."""

from .logging import configure_logging, level_from_verbosity

__all__ = ["configure_logging", "level_from_verbosity"]
