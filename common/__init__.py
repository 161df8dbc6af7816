"""
Common utilities shared across the weather package and the CLI.

This package contains logging and path helpers that need to be imported
everywhere without causing circular imports.
"""

from common.logger import debug, info, warning, error, get_log_file_path

__all__ = ["debug", "info", "warning", "error", "get_log_file_path"]
