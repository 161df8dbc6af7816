"""
Handoff files for the announcement renderer.

The time announcer reads the display temperature and the timezone from
small text files in the temp directory. Stale files are removed before
every lookup, so a failed run never leaves old or partial values behind.
"""

import os
import tempfile
from pathlib import Path
from typing import List

from common import logger as debug_logger
from common.paths import TMP_DIR, get_output_files, get_temperature_file, get_timezone_file
from saytime_weather.core.models import AnnouncementPayload


def cleanup_output_files(tmp_dir: Path = TMP_DIR) -> None:
    """Remove handoff files from a previous run."""
    debug_logger.debug("Cleaning up old weather files:")
    for path in get_output_files(tmp_dir):
        if path.exists():
            debug_logger.debug(f"  Removing: {path}")
            try:
                path.unlink()
            except OSError as e:
                debug_logger.warning(f"Could not remove file: {path} - {e}")


def _write_atomic(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}-")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def write_announcement_files(payload: AnnouncementPayload, tmp_dir: Path = TMP_DIR) -> List[Path]:
    """
    Write the temperature and timezone handoff files.

    The temperature file is skipped when the reading failed the sanity
    check, and the timezone file when the source did not supply one.

    Returns:
        Paths that were written

    Raises:
        OSError: If a file cannot be written
    """
    written = []
    if payload.temperature_display is not None:
        path = get_temperature_file(tmp_dir)
        _write_atomic(path, str(payload.temperature_display))
        written.append(path)
    if payload.timezone:
        path = get_timezone_file(tmp_dir)
        _write_atomic(path, payload.timezone)
        written.append(path)
    debug_logger.debug(f"Wrote announcement files: {[str(p) for p in written]}")
    return written
