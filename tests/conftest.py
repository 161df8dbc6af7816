"""
Pytest configuration and shared fixtures for saytime-weather tests.

Provider fakes record every call so tests can assert on network usage
without touching the network.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from saytime_weather.cache.manager import DirectoryStore, WeatherCache  # noqa: E402
from saytime_weather.config.settings import WeatherConfig  # noqa: E402
from saytime_weather.core.errors import SourceFetchFailed  # noqa: E402
from saytime_weather.core.models import Coordinates, Fahrenheit, SourceKind, WeatherObservation  # noqa: E402
from saytime_weather.core.pipeline import WeatherServices  # noqa: E402


class FakeGeocoder:
    """Geocoder answering from dicts; ``failing`` queries raise SourceFetchFailed."""

    def __init__(self, postal=None, places=None, failing=()):
        self.postal = postal or {}
        self.places = places or {}
        self.failing = set(failing)
        self.calls = []

    def search_postal(self, postal_code, country=None):
        self.calls.append(('postal', postal_code, country))
        if ('postal', postal_code, country) in self.failing:
            raise SourceFetchFailed("simulated outage")
        return self.postal.get((postal_code, country))

    def search_place(self, name):
        self.calls.append(('place', name))
        if ('place', name) in self.failing:
            raise SourceFetchFailed("simulated outage")
        return self.places.get(name)


class FakeForecast:
    def __init__(self, temperature_f=72.0, condition="Clear", timezone="America/Chicago"):
        self.observation = WeatherObservation(
            temperature=Fahrenheit(temperature_f),
            condition=condition,
            timezone=timezone,
            source=SourceKind.GRIDDED_FORECAST,
        )
        self.error = None
        self.calls = []

    def fetch(self, coords):
        self.calls.append(coords)
        if self.error:
            raise self.error
        return self.observation


class FakeMetar:
    def __init__(self, reports=None):
        self.reports = reports or {}
        self.calls = []

    def fetch(self, icao):
        self.calls.append(icao)
        if icao not in self.reports:
            raise SourceFetchFailed(f"No METAR available for {icao}")
        return self.reports[icao]


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def geocoder():
    return FakeGeocoder(postal={
        ('77511', 'us'): Coordinates(29.42, -95.24),
    })


@pytest.fixture
def forecast():
    return FakeForecast()


@pytest.fixture
def metar():
    return FakeMetar({
        'KJFK': "KJFK 121651Z 31008KT 10SM FEW250 05/M02 A3012 RMK AO2",
    })


@pytest.fixture
def config(tmp_path):
    """Config with sound and output dirs in a temp directory."""
    sound_dir = tmp_path / "wx"
    sound_dir.mkdir()
    for name in ("clear", "rain", "snow", "cloudy"):
        (sound_dir / f"{name}.ulaw").write_bytes(b"\xff" * 8)
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    return WeatherConfig(sound_dir=sound_dir, output_dir=output_dir)


@pytest.fixture
def weather_cache(tmp_path, clock):
    store = DirectoryStore(tmp_path / "cache", timer=clock)
    return WeatherCache(store=store, ttl=1800, timer=clock)


@pytest.fixture
def services(geocoder, forecast, metar, weather_cache):
    return WeatherServices(
        geocoder=geocoder,
        forecast=forecast,
        metar=metar,
        cache=weather_cache,
    )
