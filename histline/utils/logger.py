"""
Logging utilities shared by every Histline module.

Key Features:
    - One log file per process run, grouped in date-named directories
    - Size-based rotation that survives file permission errors
    - Log level taken from the LOG_LEVEL environment variable
    - Cleanup of log directories older than a week
"""

import datetime
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_DIR.mkdir(exist_ok=True)

LOG_FILE_BASENAME = "histline"

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

MAX_LOG_SIZE_BYTES = 5 * 1024 * 1024
MAX_BACKUP_COUNT = 10

_run_started_at = datetime.datetime.now()
_date_dir = LOG_DIR / _run_started_at.strftime("%Y-%m-%d")
_date_dir.mkdir(exist_ok=True)

# All loggers of one process write to the same file
RUN_LOG_FILE = (
    _date_dir
    / f"{LOG_FILE_BASENAME}_{_run_started_at.strftime('%Y-%m-%d_%H-%M-%S')}.log"
)

_shared_file_handler: logging.Handler | None = None


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating handler that keeps writing to the current file if rollover fails."""

    def doRollover(self):
        try:
            super().doRollover()
        except (OSError, PermissionError) as e:
            # The logger itself cannot be used from inside its own handler
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


def _get_shared_file_handler() -> logging.Handler:
    global _shared_file_handler
    if _shared_file_handler is None:
        _shared_file_handler = SafeRotatingFileHandler(
            RUN_LOG_FILE,
            maxBytes=MAX_LOG_SIZE_BYTES,
            backupCount=MAX_BACKUP_COUNT,
            encoding="utf-8",
        )
        _shared_file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        cleanup_old_logs(keep_days=7)
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
    logger.addHandler(_get_shared_file_handler())

    return logger


def cleanup_old_logs(keep_days: int = 7):
    """Remove date directories (and the log files in them) older than keep_days."""
    cutoff_time = datetime.datetime.now() - datetime.timedelta(days=keep_days)
    deleted_count = 0
    failed_count = 0

    for date_dir in LOG_DIR.iterdir():
        if not date_dir.is_dir():
            continue
        try:
            dir_date = datetime.datetime.strptime(date_dir.name, "%Y-%m-%d")
        except ValueError:
            # Not one of ours
            continue
        if dir_date >= cutoff_time:
            continue

        for log_file in date_dir.glob(f"{LOG_FILE_BASENAME}_*.log*"):
            try:
                log_file.unlink()
                deleted_count += 1
            except (PermissionError, FileNotFoundError):
                failed_count += 1
        try:
            date_dir.rmdir()
        except OSError:
            pass  # Directory still holds files we could not delete

    if deleted_count > 0 or failed_count > 0:
        sys.stderr.write(
            f"Log cleanup completed: {deleted_count} files deleted, {failed_count} files failed to delete\n"
        )
