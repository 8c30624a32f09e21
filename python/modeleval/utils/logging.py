"""Logging utilities."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LEVEL_ENV_VAR = "MODELEVAL_LOG_LEVEL"


def level_from_verbosity(verbosity: int, default: int = logging.WARNING) -> int:
    """Map a count of ``-v`` flags to a logging level (``-v`` INFO, ``-vv`` DEBUG)."""

    env = os.environ.get(LEVEL_ENV_VAR)
    if verbosity <= 0 and env:
        named = logging.getLevelName(env.upper())
        if isinstance(named, int):
            return named
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return default


def configure_logging(log_path: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Configure the root logger with a stderr sink and an optional file sink."""

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    logging.captureWarnings(True)


__all__ = ["configure_logging", "level_from_verbosity", "LOG_FORMAT", "LEVEL_ENV_VAR"]
