"""Logging helpers for the sheetflow_io package."""

# Module responsibilities:
# - Attach a rotating file handler and a warnings-only console handler to the package logger once.
# - Resolve the log directory from an argument, SHEETFLOW_LOG_DIR, or ~/Sheetflow/logs.
# - Read the file verbosity from SHEETFLOW_LOG_LEVEL.

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import List, Optional

PACKAGE_LOGGER = "sheetflow_io"
LOG_FILE_NAME = "sheetflow_io.log"
DEFAULT_LOG_BASE = Path.home() / "Sheetflow" / "logs"
LOG_DIR_ENV = "SHEETFLOW_LOG_DIR"
LOG_LEVEL_ENV = "SHEETFLOW_LOG_LEVEL"

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def log_directory(log_dir: Optional[Path] = None) -> Path:
    """Return the directory log files go to, creating it when needed."""

    if log_dir is None:
        env_dir = os.environ.get(LOG_DIR_ENV)
        log_dir = Path(env_dir) if env_dir else DEFAULT_LOG_BASE
    target = Path(log_dir)
    target.mkdir(parents=True, exist_ok=True)
    return target


def file_log_level() -> int:
    """Level named by ``SHEETFLOW_LOG_LEVEL``; unknown names fall back to INFO."""

    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handlers(directory: Path, level: int) -> List[logging.Handler]:
    file_handler = logging.handlers.RotatingFileHandler(
        directory / LOG_FILE_NAME, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(level)

    # CLI output shares the terminal, so the console only sees problems.
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)

    handlers: List[logging.Handler] = [file_handler, console_handler]
    for handler in handlers:
        handler.setFormatter(_FORMATTER)
    return handlers


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a logger scoped under ``sheetflow_io``.

    The package logger is configured on the first call; later calls reuse its
    handlers and ignore ``log_dir``.

    Args:
        name: Logger name suffix appended to the package logger namespace.
        log_dir: Optional override for the logging directory.
    """

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        level = file_log_level()
        for handler in _build_handlers(log_directory(log_dir), level):
            package_logger.addHandler(handler)
        package_logger.setLevel(min(level, logging.WARNING))
        package_logger.propagate = False
    return package_logger.getChild(name)
