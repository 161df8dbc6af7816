"""Centralized path management for saytime-weather.

System locations (configuration files, cache directories, the Asterisk
sound directory and the announcement handoff files) are fixed by the
Asterisk installation. Per-user locations are used for logs and as the
last-resort cache directory:

On Windows: %LOCALAPPDATA%/SaytimeWeather/
On macOS:   ~/Library/Application Support/SaytimeWeather/
On Linux:   ~/.local/share/SaytimeWeather/
"""

import os
import sys
from pathlib import Path
from typing import List

# Application name for user data directory
APP_NAME = "SaytimeWeather"

# Searched in order; the first existing file wins
CONFIG_PATHS = [
    Path("/etc/asterisk/local/weather.ini"),
    Path("/etc/asterisk/weather.ini"),
    Path("/usr/local/etc/weather.ini"),
]

SYSTEM_CACHE_PATHS = [
    Path("/var/cache/weather"),
    Path("/tmp/weather-cache"),
]

WEATHER_SOUND_DIR = Path("/usr/share/asterisk/sounds/en/wx")

TMP_DIR = Path("/tmp")


def get_user_data_dir() -> Path:
    """Get the user data directory for writable files.

    Returns:
        Path to the user data directory
    """
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        if not base:
            base = os.path.expanduser("~\\AppData\\Local")
        path = Path(base) / APP_NAME
    elif sys.platform == "darwin":
        path = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        xdg_data = os.environ.get("XDG_DATA_HOME")
        if xdg_data:
            path = Path(xdg_data) / APP_NAME
        else:
            path = Path.home() / ".local" / "share" / APP_NAME

    return path


def get_user_cache_dir() -> Path:
    """Get the user cache directory.

    Returns:
        Path to the cache directory within user data
    """
    return get_user_data_dir() / "cache"


def get_user_logs_dir() -> Path:
    """Get the user logs directory.

    Returns:
        Path to the logs directory within user data
    """
    return get_user_data_dir() / "logs"


def get_cache_paths() -> List[Path]:
    """Get candidate weather cache directories in order of preference.

    Returns:
        System cache directories followed by the per-user cache directory
    """
    return SYSTEM_CACHE_PATHS + [get_user_cache_dir() / "weather"]


def get_temperature_file(tmp_dir: Path = TMP_DIR) -> Path:
    """Path of the display temperature handoff file."""
    return tmp_dir / "temperature"


def get_timezone_file(tmp_dir: Path = TMP_DIR) -> Path:
    """Path of the timezone handoff file read by the time announcer."""
    return tmp_dir / "timezone"


def get_condition_file(tmp_dir: Path = TMP_DIR) -> Path:
    """Path of the rendered condition audio (owned by the renderer, cleaned here)."""
    return tmp_dir / "condition.ulaw"


def get_output_files(tmp_dir: Path = TMP_DIR) -> List[Path]:
    """All handoff files that a run may leave behind."""
    return [
        get_temperature_file(tmp_dir),
        get_condition_file(tmp_dir),
        get_timezone_file(tmp_dir),
    ]
