"""Tender Ranker — Logging Setup.

Modules obtain named loggers through get_logger() and never configure
handlers themselves, so embedding the ranking engine leaves the host's
logging untouched. The command line runner calls setup_logging() once
its settings are loaded to get colored console output and a rotating
log file.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# ── Constants ─────────────────────────────────────────────
LOG_DIR_ENV = "TENDER_RANKER_LOG_DIR"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
LOG_FILE_NAME = "tender_ranker.log"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# ── ANSI Color Codes ─────────────────────────────────────
COLORS = {
    "DEBUG": "\033[36m",     # Cyan
    "INFO": "\033[32m",      # Green
    "WARNING": "\033[33m",   # Yellow
    "ERROR": "\033[31m",     # Red
    "CRITICAL": "\033[41m",  # Red background
}
RESET = "\033[0m"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Handlers installed by setup_logging(), removed again by reset_logging()
_handlers: list[logging.Handler] = []
_console_handler: logging.Handler | None = None


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds ANSI colors to console log output.

    Colors are applied to the log level name. The record
    is copied first so the file handler still sees the plain level name.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with a colored level name.

        Args:
            record: The log record to format.

        Returns:
            Formatted log string with ANSI color codes.
        """
        record = logging.makeLogRecord(record.__dict__)
        color = COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname:<8}{RESET}"
        return super().format(record)


def _check_level(level: str) -> str:
    name = str(level).upper()
    if name not in _VALID_LEVELS:
        raise ValueError(
            f"Invalid log level '{level}'. Expected one of: {', '.join(_VALID_LEVELS)}"
        )
    return name


def resolve_log_dir(log_dir: str | Path | None = None) -> Path:
    """Pick the log directory.

    An explicit directory wins, then $TENDER_RANKER_LOG_DIR as it is at
    call time (so a .env loaded beforehand applies), then <repo>/logs.
    """
    if log_dir:
        return Path(log_dir)
    return Path(os.environ.get(LOG_DIR_ENV) or DEFAULT_LOG_DIR)


def setup_logging(level: str = "INFO", log_dir: str | Path | None = None) -> Path | None:
    """Initialize the global logging configuration.

    Sets up two handlers on the root logger:
    - Console handler: colored, at the given level (stderr, so command
      output on stdout stays clean).
    - Rotating file handler: DEBUG level, 10MB max, 5 backups.

    Handlers from an earlier call are replaced, not duplicated.

    Args:
        level: Console level, one of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_dir: Directory for the log file. See resolve_log_dir().

    Returns:
        Path of the log file, or None if file logging could not be enabled.

    Raises:
        ValueError: If the level name is not recognised.
    """
    global _console_handler
    name = _check_level(level)
    reset_logging()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # ── Console Handler ──────────────────────────────────
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, name))
    console_formatter = ColoredFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)
    _console_handler = console_handler

    # ── Rotating File Handler (DEBUG) ────────────────────
    log_file = resolve_log_dir(log_dir) / LOG_FILE_NAME
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        root_logger.warning("File logging disabled (%s): %s", log_file, exc)
        return None

    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        fmt="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)
    _handlers.append(file_handler)
    return log_file


def reset_logging() -> None:
    """Remove and close the handlers installed by setup_logging()."""
    global _console_handler
    root_logger = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    _console_handler = None


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    All modules should use this function instead of calling
    logging.getLogger() directly. No handlers are attached here.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        A logging.Logger instance.
    """
    return logging.getLogger(name)
