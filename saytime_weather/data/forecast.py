"""
Gridded current conditions from Open-Meteo (free, no API key required).
"""

from typing import Any, Dict, Optional

import requests

from common import logger as debug_logger
from saytime_weather.config.constants import OPEN_METEO_FORECAST_URL, USER_AGENT, WEATHER_TIMEOUT
from saytime_weather.core.errors import SourceFetchFailed
from saytime_weather.core.models import Coordinates, Fahrenheit, SourceKind, WeatherObservation
from saytime_weather.data.weather_parsing import weather_code_to_text


class OpenMeteoClient:
    """Fetches current weather for a coordinate pair."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = WEATHER_TIMEOUT):
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', USER_AGENT)
        self.timeout = timeout

    def fetch_current(self, coords: Coordinates) -> Dict[str, Any]:
        """
        Fetch the raw Open-Meteo response for a position.

        Temperature is always requested in Fahrenheit; conversion to the
        display unit happens once, when the announcement is built.

        Raises:
            SourceFetchFailed: On network, HTTP or JSON errors
        """
        params = {
            'latitude': coords.latitude,
            'longitude': coords.longitude,
            'current_weather': 'true',
            'temperature_unit': 'fahrenheit',
            'timezone': 'auto',
        }
        try:
            response = self.session.get(OPEN_METEO_FORECAST_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise SourceFetchFailed(f"Open-Meteo timeout for {coords.latitude},{coords.longitude}") from e
        except requests.RequestException as e:
            raise SourceFetchFailed(f"Open-Meteo request failed: {e}") from e
        except ValueError as e:
            raise SourceFetchFailed(f"Failed to parse Open-Meteo response: {e}") from e

    def fetch(self, coords: Coordinates) -> WeatherObservation:
        """
        Fetch current conditions for a position.

        Args:
            coords: Resolved coordinates

        Returns:
            Observation with Fahrenheit temperature and the inferred timezone

        Raises:
            SourceFetchFailed: If the request fails or has no current weather
        """
        debug_logger.debug(f"Fetching weather from Open-Meteo: lat={coords.latitude}, lon={coords.longitude}")
        data = self.fetch_current(coords)
        return observation_from_open_meteo(data)


def observation_from_open_meteo(data: Dict[str, Any]) -> WeatherObservation:
    """
    Build an observation from an Open-Meteo forecast response.

    Raises:
        SourceFetchFailed: If current_weather or its temperature is missing
    """
    current = data.get('current_weather') if isinstance(data, dict) else None
    if not current or current.get('temperature') is None:
        raise SourceFetchFailed("Open-Meteo response has no current weather")

    try:
        temperature = Fahrenheit(float(current['temperature']))
    except (TypeError, ValueError) as e:
        raise SourceFetchFailed(f"Invalid Open-Meteo temperature: {current['temperature']!r}") from e

    code = current.get('weathercode')
    condition = weather_code_to_text(code)
    timezone = data.get('timezone') or ''

    debug_logger.debug(f"  Temperature: {temperature.degrees}")
    debug_logger.debug(f"  Weather code: {code} ({condition})")
    debug_logger.debug(f"  Timezone: {timezone}")

    return WeatherObservation(
        temperature=temperature,
        condition=condition,
        timezone=timezone,
        source=SourceKind.GRIDDED_FORECAST,
    )
