"""
Aviation weather (METAR) fetching for ICAO station codes.
"""

from typing import Optional

import requests

from common import logger as debug_logger
from saytime_weather.config.constants import (
    AVIATIONWEATHER_METAR_URL, NWS_METAR_STATION_URL, USER_AGENT, WEATHER_TIMEOUT
)
from saytime_weather.core.errors import SourceFetchFailed
from saytime_weather.core.models import SourceKind, WeatherObservation
from saytime_weather.data.weather_parsing import parse_metar_condition, parse_metar_temperature


class MetarClient:
    """
    Fetches raw METAR text for a station.

    Uses aviationweather.gov as primary source, with the NWS station text
    files as fallback.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = WEATHER_TIMEOUT):
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', USER_AGENT)
        self.timeout = timeout

    def _fetch_from_aviationweather(self, icao: str) -> str:
        """
        Fetch METAR from the aviationweather.gov data API.

        Returns:
            METAR string, or empty string if the provider had nothing
        """
        params = {'ids': icao, 'format': 'raw', 'hours': 0, 'taf': 'false'}
        try:
            response = self.session.get(AVIATIONWEATHER_METAR_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            debug_logger.debug(f"aviationweather.gov METAR request failed for {icao}: {e}")
            return ""

        metar_text = response.text.strip()
        if metar_text.startswith('No METAR') or metar_text.startswith('Error'):
            return ""
        # Several reports may come back; the first line is the latest
        return metar_text.splitlines()[0].strip() if metar_text else ""

    def _fetch_from_nws(self, icao: str) -> str:
        """
        Fetch METAR from the NWS station file (fallback).

        The file has the observation time on line 1 and the report on line 2.

        Returns:
            METAR string, or empty string if unavailable
        """
        url = NWS_METAR_STATION_URL.format(icao=icao)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            debug_logger.debug(f"NWS METAR request failed for {icao}: {e}")
            return ""

        lines = response.text.splitlines()
        if len(lines) < 2:
            return ""
        return lines[1].strip()

    def fetch(self, icao: str) -> str:
        """
        Fetch the current METAR for a station.

        Args:
            icao: The ICAO code of the station

        Returns:
            Full METAR string

        Raises:
            SourceFetchFailed: If neither provider returned a report
        """
        icao = icao.upper()
        debug_logger.debug(f"Fetching METAR for {icao}")

        metar_text = self._fetch_from_aviationweather(icao)
        if not metar_text:
            debug_logger.debug(f"Trying NWS fallback for {icao}")
            metar_text = self._fetch_from_nws(icao)

        if not metar_text:
            raise SourceFetchFailed(f"No METAR available for {icao}")

        debug_logger.debug(f"METAR: {metar_text}")
        return metar_text


def observation_from_metar(metar: str) -> WeatherObservation:
    """
    Build an observation from a raw METAR.

    Raises:
        SourceFetchFailed: If the report has no temperature group
    """
    temperature = parse_metar_temperature(metar)
    if temperature is None:
        raise SourceFetchFailed(f"No temperature in METAR: {metar}")
    return WeatherObservation(
        temperature=temperature,
        condition=parse_metar_condition(metar),
        timezone="",
        source=SourceKind.AVIATION_REPORT,
    )


def fetch_metar_weather(client: MetarClient, icao: str) -> WeatherObservation:
    """
    Fetch and parse current weather for a station.

    Raises:
        SourceFetchFailed: If no report is available or it cannot be parsed
    """
    return observation_from_metar(client.fetch(icao))
