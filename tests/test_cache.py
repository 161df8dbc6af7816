"""
Tests for the two-layer weather cache.
"""

import json
import os
import sys

import pytest

from saytime_weather.cache.manager import DirectoryStore, WeatherCache, open_weather_cache
from saytime_weather.core.errors import CacheUnavailable
from saytime_weather.core.models import CacheEntry, Fahrenheit, SourceKind, WeatherObservation


@pytest.fixture
def observation():
    return WeatherObservation(
        temperature=Fahrenheit(68.4),
        condition="Partly Cloudy",
        timezone="Europe/Paris",
        source=SourceKind.GRIDDED_FORECAST,
    )


class TestWeatherCache:

    def test_miss_then_hit(self, weather_cache, observation):
        assert weather_cache.get("75001") is None
        weather_cache.set("75001", observation)
        assert weather_cache.get("75001") == observation

    def test_keyed_on_raw_token(self, weather_cache, observation):
        weather_cache.set("kjfk", observation)
        assert weather_cache.get("KJFK") is None

    def test_expires_after_ttl(self, weather_cache, observation, clock):
        weather_cache.set("75001", observation)
        clock.advance(1799)
        assert weather_cache.get("75001") == observation
        clock.advance(1)
        assert weather_cache.get("75001") is None

    def test_disk_layer_survives_new_instance(self, tmp_path, clock, observation):
        first = WeatherCache(DirectoryStore(tmp_path / "c", timer=clock), ttl=600, timer=clock)
        first.set("EGLL", observation)

        second = WeatherCache(DirectoryStore(tmp_path / "c", timer=clock), ttl=600, timer=clock)
        assert second.get("EGLL") == observation

    def test_clear_drops_memory_layer_only(self, weather_cache, observation):
        weather_cache.set("75001", observation)
        weather_cache.clear()
        assert weather_cache.get("75001") == observation

    def test_bypass_never_reads_or_writes(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path / "c", timer=clock)
        cache = WeatherCache(store, ttl=600, bypass=True, timer=clock)
        cache.set("75001", observation)
        assert cache.get("75001") is None
        assert list((tmp_path / "c").glob("*.json")) == []
        assert not cache.enabled

    def test_memory_only_cache(self, clock, observation):
        cache = WeatherCache(store=None, ttl=60, timer=clock)
        cache.set("KJFK", observation)
        assert cache.get("KJFK") == observation

    def test_write_failure_is_not_raised(self, weather_cache, observation, monkeypatch):
        def fail(entry):
            raise OSError("disk full")
        monkeypatch.setattr(weather_cache.store, "set", fail)
        weather_cache.set("75001", observation)
        assert weather_cache.get("75001") == observation


class TestDirectoryStore:

    def test_entry_round_trip_keeps_fahrenheit(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path, timer=clock)
        store.set(CacheEntry("75001", observation, clock(), 600))
        entry = store.get("75001")
        assert entry.value.temperature.degrees == pytest.approx(68.4)
        assert entry.value.source is SourceKind.GRIDDED_FORECAST

    def test_corrupt_file_is_a_miss(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path, timer=clock)
        store.set(CacheEntry("75001", observation, clock(), 600))
        store._path("75001").write_text("{not json", encoding="utf-8")
        assert store.get("75001") is None

    def test_no_partial_files_left(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path, timer=clock)
        store.set(CacheEntry("75001", observation, clock(), 600))
        assert [p for p in tmp_path.iterdir() if p.name.startswith(".tmp-")] == []

    def test_purge_removes_expired_and_unreadable(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path, timer=clock)
        store.set(CacheEntry("old", observation, clock(), 10))
        store.set(CacheEntry("new", observation, clock(), 600))
        (tmp_path / "junk.json").write_text("nope", encoding="utf-8")
        clock.advance(60)

        assert store.purge() == 2
        assert store.get("new") is not None
        stored_keys = [json.loads(p.read_text())["key"] for p in tmp_path.glob("*.json")]
        assert stored_keys == ["new"]

    def test_purge_leaves_in_flight_writes_alone(self, tmp_path, clock):
        store = DirectoryStore(tmp_path, timer=clock)
        in_flight = [tmp_path / ".tmp-otherproc.tmp", tmp_path / ".tmp-olderproc.json"]
        for path in in_flight:
            path.write_text('{"key": "7551', encoding="utf-8")

        assert store.purge() == 0
        assert all(path.exists() for path in in_flight)

    def test_maybe_purge_respects_interval(self, tmp_path, clock, observation):
        store = DirectoryStore(tmp_path, purge_interval=3600, timer=clock)
        store.set(CacheEntry("a", observation, clock(), 10))
        clock.advance(60)
        store.set(CacheEntry("b", observation, clock(), 600))
        # Within the purge interval, the expired file stays on disk
        assert store._path("a").exists()

        clock.advance(3600)
        store.set(CacheEntry("c", observation, clock(), 600))
        assert not store._path("a").exists()

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="permission bits not enforced")
    def test_unwritable_directory(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        try:
            with pytest.raises(CacheUnavailable):
                DirectoryStore(locked)
        finally:
            locked.chmod(0o700)


class TestOpenWeatherCache:

    def test_disabled(self, tmp_path):
        cache = open_weather_cache(enabled=False, paths=[tmp_path])
        assert not cache.enabled
        assert list(tmp_path.iterdir()) == []

    def test_first_usable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        cache = open_weather_cache(ttl=60, paths=[blocker / "sub", tmp_path / "good"])
        assert cache.enabled
        assert cache.store.root == tmp_path / "good"
        assert cache.ttl == 60

    def test_degrades_to_disabled(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        cache = open_weather_cache(paths=[blocker / "sub"])
        assert not cache.enabled
        assert cache.store is None
