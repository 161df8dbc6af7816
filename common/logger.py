"""
Centralized logging module for saytime-weather.

This module provides logging to a daily debug file for tracking lookups,
with an optional console handler for verbose command-line runs.
It is designed to be imported by every package module without
causing circular imports.
"""

import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from common.paths import get_user_logs_dir

LOGS_DIR = str(get_user_logs_dir())


def cleanup_old_logs(days_to_keep: int = 10) -> None:
    """Remove log files older than the specified number of days."""
    try:
        cutoff_date = datetime.now() - timedelta(days=days_to_keep)
        logs_path = Path(LOGS_DIR)

        for log_file in logs_path.glob('weather_*.log'):
            try:
                file_mtime = datetime.fromtimestamp(log_file.stat().st_mtime)
                if file_mtime < cutoff_date:
                    log_file.unlink()
            except OSError:
                pass  # Skip files we can't delete
    except OSError:
        pass


# One file per day
LOG_FILE = os.path.join(LOGS_DIR, f'weather_{datetime.now().strftime("%Y%m%d")}.log')

_logger = logging.getLogger('saytime_weather')
_logger.setLevel(logging.DEBUG)
_console_handler: Optional[logging.Handler] = None

# Only add handler if not already added (prevents duplicate handlers on reimport)
if not _logger.handlers:
    try:
        os.makedirs(LOGS_DIR, exist_ok=True)
        cleanup_old_logs()
        _file_handler: logging.Handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        _file_handler.setLevel(logging.DEBUG)
        _file_handler.setFormatter(logging.Formatter(
            '%(asctime)s.%(msecs)03d | %(levelname)-8s | %(message)s',
            datefmt='%H:%M:%S'
        ))
    except OSError:
        # Read-only home or sandbox: keep running without a log file
        _file_handler = logging.NullHandler()
    _logger.addHandler(_file_handler)


def enable_console(verbose: bool = True) -> None:
    """Mirror log output to stderr (DEBUG when verbose, WARNING otherwise)."""
    global _console_handler
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        _logger.addHandler(_console_handler)
    _console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)


def debug(message: str) -> None:
    """Log a debug message."""
    _logger.debug(message)


def info(message: str) -> None:
    """Log an info message."""
    _logger.info(message)


def warning(message: str) -> None:
    """Log a warning message."""
    _logger.warning(message)


def error(message: str, exc_info: bool = False) -> None:
    """Log an error message."""
    _logger.error(message, exc_info=exc_info)


def get_log_file_path() -> str:
    """Get the path to the current log file."""
    return LOG_FILE
