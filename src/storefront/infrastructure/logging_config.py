"""
logging_config.py — Centralized Logging Configuration

Configures one logging setup for the whole application: a single format,
console output always, and a log file when one is configured.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """
    Configures the root logger.

    Args:
        level: a logging level name such as "INFO".
        log_file: also append records to this file when given.

    Logs go to stderr so command output on stdout stays machine-readable.
    Calling it again replaces the previous handlers.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)


def get_logger(name: str) -> logging.Logger:
    """Returns the logger for a module; pass ``__name__``."""
    return logging.getLogger(name)
