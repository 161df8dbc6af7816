"""
Weather lookup pipeline.

token -> classify -> cache lookup (raw token) -> METAR for ICAO codes, else
coordinates -> Open-Meteo -> cache store -> announcement payload.

Configuration is passed in explicitly with every call; provider clients
and the cache live in a WeatherServices bundle so they can be replaced
in tests.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import requests

from common import logger as debug_logger
from saytime_weather.cache.manager import WeatherCache, open_weather_cache
from saytime_weather.config.settings import Overrides, WeatherConfig, apply_overrides
from saytime_weather.core.classifier import classify
from saytime_weather.core.errors import ResolutionFailed, SourceFetchFailed
from saytime_weather.core.models import (
    AnnouncementPayload, ClassifiedLocation, LocationKind, PostalShape, WeatherObservation
)
from saytime_weather.core.normalizer import build_announcement, list_sound_assets
from saytime_weather.core.resolver import resolve_coordinates
from saytime_weather.data.aviation import MetarClient, fetch_metar_weather
from saytime_weather.data.forecast import OpenMeteoClient
from saytime_weather.data.geocoding import NominatimGeocoder


@dataclass
class WeatherServices:
    """External collaborators used by the pipeline."""
    geocoder: NominatimGeocoder
    forecast: OpenMeteoClient
    metar: MetarClient
    cache: WeatherCache = field(default_factory=WeatherCache.disabled)
    list_assets: Callable[[Path], List[str]] = list_sound_assets

    @classmethod
    def create(cls, config: WeatherConfig, session: Optional[requests.Session] = None) -> "WeatherServices":
        """Build real HTTP clients and open the on-disk cache per config."""
        session = session or requests.Session()
        return cls(
            geocoder=NominatimGeocoder(),
            forecast=OpenMeteoClient(session=session),
            metar=MetarClient(session=session),
            cache=open_weather_cache(ttl=config.cache_duration, enabled=config.cache_enabled),
        )


def _fetch_observation(location: ClassifiedLocation, services: WeatherServices) -> WeatherObservation:
    """
    Fetch fresh weather for a classified location.

    ICAO codes always try METAR first. If that yields nothing, the token
    is retried as an international postal code.

    Raises:
        ResolutionFailed: If no source produced an observation
    """
    if location.kind is LocationKind.ICAO_CODE:
        debug_logger.debug("Detected ICAO code, trying METAR...")
        try:
            observation = fetch_metar_weather(services.metar, location.value)
            debug_logger.debug(
                f"METAR: {observation.temperature.degrees:.0f}°F, {observation.condition}"
            )
            return observation
        except SourceFetchFailed as e:
            debug_logger.debug(f"METAR fetch failed ({e}), falling back to postal code lookup")
        location = ClassifiedLocation(
            location.raw, LocationKind.POSTAL_CODE, location.value,
            shape=PostalShape.INTERNATIONAL,
        )

    coords = resolve_coordinates(location, services.geocoder)
    if coords is None:
        raise ResolutionFailed(f"Could not get coordinates for location: {location.raw}")

    try:
        observation = services.forecast.fetch(coords)
    except SourceFetchFailed as e:
        raise ResolutionFailed(f"Failed to fetch weather data from Open-Meteo: {e}") from e

    debug_logger.debug(
        f"Open-Meteo: {observation.temperature.degrees:.0f}°F, {observation.condition}"
    )
    return observation


def get_weather(
    token: str,
    config: WeatherConfig,
    services: WeatherServices,
    overrides: Overrides = Overrides(),
) -> WeatherObservation:
    """
    Look up current weather for a location token.

    Args:
        token: Postal code, ICAO code or named outpost
        config: Loaded configuration
        services: Provider clients and cache
        overrides: Per-run overrides (country, unit, cache bypass, conditions)

    Returns:
        Observation with the temperature in Fahrenheit

    Raises:
        ResolutionFailed: If the location could not be resolved or no
                          provider returned data
    """
    effective = apply_overrides(config, overrides)
    location = classify(token, effective.default_country)
    debug_logger.info(f"Weather lookup for {token!r} ({location.kind.value})")

    if effective.cache_enabled:
        cached = services.cache.get(location.raw)
        if cached is not None:
            return cached

    observation = _fetch_observation(location, services)

    # Only full successes are cached
    if effective.cache_enabled:
        services.cache.set(location.raw, observation)
    return observation


def announce(
    token: str,
    config: WeatherConfig,
    services: WeatherServices,
    overrides: Overrides = Overrides(),
) -> Tuple[WeatherObservation, AnnouncementPayload]:
    """
    Look up weather and build the announcement payload.

    Raises:
        ResolutionFailed: See get_weather()
    """
    effective = apply_overrides(config, overrides)
    observation = get_weather(token, config, services, overrides)

    assets: List[str] = []
    if effective.process_condition:
        assets = services.list_assets(effective.sound_dir)

    payload = build_announcement(
        observation,
        effective.temperature_mode,
        assets=assets,
        process_condition=effective.process_condition,
    )
    return observation, payload
