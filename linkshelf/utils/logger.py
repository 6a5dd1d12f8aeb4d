"""
Logging utilities for the linkshelf service.

Every module obtains a named logger through ``setup_logger``. Records go to the
console and to a size-rotated log file shared by all loggers of the process.

Environment:
    LOG_LEVEL   minimum level (default INFO)
    LOG_DIR     directory for log files (default ``logs``)
"""

import datetime
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_FILE_BASENAME = "linkshelf"

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_LOG_SIZE_BYTES = 5 * 1024 * 1024
MAX_BACKUP_COUNT = 10

_shared_file_handler: logging.Handler | None = None


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating handler that keeps writing to the current file if rotation fails."""

    def doRollover(self):
        try:
            super().doRollover()
        except OSError as e:
            sys.stderr.write(
                f"Log rotation failed: {e}. Continuing with current log file.\n"
            )
            sys.stderr.flush()


def _get_log_level(level_str: str) -> int:
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def _get_file_handler() -> logging.Handler:
    """Create the process-wide file handler on first use."""
    global _shared_file_handler
    if _shared_file_handler is None:
        now = datetime.datetime.now()
        date_dir = LOG_DIR / now.strftime("%Y-%m-%d")
        date_dir.mkdir(parents=True, exist_ok=True)
        log_file = (
            date_dir / f"{LOG_FILE_BASENAME}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.log"
        )
        handler = SafeRotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE_BYTES,
            backupCount=MAX_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        _shared_file_handler = handler
    return _shared_file_handler


def setup_logger(name: str, level: str = None) -> logging.Logger:
    """Set up logger with both console and file handlers."""
    logger = logging.getLogger(name)
    log_level = _get_log_level(level or DEFAULT_LOG_LEVEL)
    logger.setLevel(log_level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)
    logger.addHandler(_get_file_handler())

    return logger


def cleanup_old_logs(keep_days: int = 7) -> int:
    """Delete dated log directories older than ``keep_days``. Returns files removed."""
    if not LOG_DIR.exists():
        return 0

    cutoff = datetime.datetime.now() - datetime.timedelta(days=keep_days)
    deleted = 0
    for date_dir in LOG_DIR.iterdir():
        if not date_dir.is_dir():
            continue
        try:
            dir_date = datetime.datetime.strptime(date_dir.name, "%Y-%m-%d")
        except ValueError:
            continue
        if dir_date >= cutoff:
            continue
        for log_file in date_dir.iterdir():
            try:
                log_file.unlink()
                deleted += 1
            except OSError:
                continue
        try:
            date_dir.rmdir()
        except OSError:
            pass  # still holds files we could not delete
    return deleted
