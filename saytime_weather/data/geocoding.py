"""
Postal code and place name geocoding via Nominatim/OpenStreetMap.

Nominatim's usage policy allows at most one request per second, so every
call goes through a geopy RateLimiter shared by the geocoder instance.
"""

from typing import Any, Dict, Optional, Union

from geopy.exc import GeocoderServiceError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from common import logger as debug_logger
from saytime_weather.config.constants import GEOCODING_MIN_INTERVAL, GEOCODING_TIMEOUT, USER_AGENT
from saytime_weather.core.errors import SourceFetchFailed
from saytime_weather.core.models import Coordinates

# Nominatim filters on ISO 3166-1 alpha-2 codes
COUNTRY_CODE_ALIASES = {'uk': 'gb'}


def country_code(country: str) -> str:
    """Normalize a configured country to the code Nominatim filters on."""
    code = country.strip().lower()
    return COUNTRY_CODE_ALIASES.get(code, code)


class NominatimGeocoder:
    """Resolves postal codes and place names to coordinates."""

    def __init__(
        self,
        geolocator: Optional[Nominatim] = None,
        timeout: float = GEOCODING_TIMEOUT,
        min_delay_seconds: float = GEOCODING_MIN_INTERVAL,
    ):
        self.geolocator = geolocator or Nominatim(user_agent=USER_AGENT, timeout=timeout)
        # No retries here: the resolver owns the fallback chain
        self._geocode = RateLimiter(
            self.geolocator.geocode,
            min_delay_seconds=min_delay_seconds,
            max_retries=0,
            swallow_exceptions=False,
        )

    def _lookup(self, query: Union[str, Dict[str, str]], **kwargs: Any) -> Optional[Coordinates]:
        """
        Run one rate-limited Nominatim search.

        Returns:
            Coordinates of the best match, or None if nothing matched

        Raises:
            SourceFetchFailed: On network, HTTP or parse errors
        """
        debug_logger.debug(f"  Nominatim search: {query} {kwargs or ''}")
        try:
            location = self._geocode(query, exactly_one=True, **kwargs)
        except GeocoderServiceError as e:
            raise SourceFetchFailed(f"Nominatim request failed: {e}") from e

        if location is None:
            return None
        coords = Coordinates(float(location.latitude), float(location.longitude))
        debug_logger.debug(f"  Found: {location.address} ({coords.latitude}, {coords.longitude})")
        return coords

    def search_postal(self, postal_code: str, country: Optional[str] = None) -> Optional[Coordinates]:
        """
        Geocode a postal code, optionally restricted to one country.

        Returns:
            Coordinates of the best match, or None if not found

        Raises:
            SourceFetchFailed: If the request itself failed
        """
        kwargs = {}
        if country:
            kwargs['country_codes'] = country_code(country)
        return self._lookup({'postalcode': postal_code}, **kwargs)

    def search_place(self, name: str) -> Optional[Coordinates]:
        """
        Geocode a free-text place name.

        Returns:
            Coordinates of the best match, or None if not found

        Raises:
            SourceFetchFailed: If the request itself failed
        """
        return self._lookup(name)
