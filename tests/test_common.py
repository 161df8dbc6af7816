"""
Tests for the shared logging and path helpers.
"""

import logging
from pathlib import Path

from common import logger as debug_logger
from common import paths


class TestPaths:

    def test_user_dirs_follow_xdg(self, monkeypatch, tmp_path):
        monkeypatch.setattr(paths.sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert paths.get_user_data_dir() == tmp_path / "SaytimeWeather"
        assert paths.get_user_logs_dir() == tmp_path / "SaytimeWeather" / "logs"

    def test_cache_paths_end_with_user_dir(self, monkeypatch, tmp_path):
        monkeypatch.setattr(paths.sys, "platform", "linux")
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        candidates = paths.get_cache_paths()
        assert candidates[:2] == [Path("/var/cache/weather"), Path("/tmp/weather-cache")]
        assert candidates[-1] == tmp_path / "SaytimeWeather" / "cache" / "weather"

    def test_output_files(self, tmp_path):
        names = [p.name for p in paths.get_output_files(tmp_path)]
        assert names == ["temperature", "condition.ulaw", "timezone"]


class TestLogger:

    def test_log_file_is_daily(self):
        assert Path(debug_logger.get_log_file_path()).name.startswith("weather_")

    def test_enable_console_adds_one_handler(self, monkeypatch):
        log = logging.getLogger("saytime_weather")
        monkeypatch.setattr(debug_logger, "_console_handler", None)
        debug_logger.enable_console()
        debug_logger.enable_console(verbose=False)
        handler = debug_logger._console_handler
        try:
            assert [h for h in log.handlers if type(h) is logging.StreamHandler] == [handler]
            assert handler.level == logging.WARNING
        finally:
            log.removeHandler(handler)
