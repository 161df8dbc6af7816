"""
Coordinate resolution for classified location tokens.

Fallback order for postal codes:
1. Postal code search (country-restricted for 5-digit and Canadian codes)
2. 5-digit codes with a country: one unrestricted international search
3. Canadian codes: geocode a proxy city from the 3-character FSA table,
   else from the single-letter table

Attempts run strictly in this order and stop at the first success. A
provider failure on one attempt moves on to the next one.
"""

from typing import Callable, Optional

from common import logger as debug_logger
from saytime_weather.core.errors import SourceFetchFailed
from saytime_weather.core.locations import NAMED_OUTPOSTS, canadian_proxy_city
from saytime_weather.core.models import ClassifiedLocation, Coordinates, LocationKind, PostalShape
from saytime_weather.data.geocoding import NominatimGeocoder


def outpost_coordinates(key: str) -> Coordinates:
    """
    Look up a named outpost; never touches the network.

    Raises:
        KeyError: If the key is not in the outpost table
    """
    lat, lon, name = NAMED_OUTPOSTS[key]
    debug_logger.debug(f"  Special location: {name} ({lat}, {lon})")
    return Coordinates(lat, lon)


def _attempt(description: str, lookup: Callable[[], Optional[Coordinates]]) -> Optional[Coordinates]:
    """Run one geocoding attempt, treating provider failures as a miss."""
    debug_logger.debug(f"  Trying {description}")
    try:
        coords = lookup()
    except SourceFetchFailed as e:
        debug_logger.warning(f"{description} failed: {e}")
        return None
    if coords is None:
        debug_logger.debug(f"  No coordinates found via {description}")
    return coords


def resolve_postal(location: ClassifiedLocation, geocoder: NominatimGeocoder) -> Optional[Coordinates]:
    """
    Resolve a postal code through the geocoder and its fallbacks.

    Returns:
        Coordinates, or None once every fallback is exhausted
    """
    postal = location.value
    country = location.country or None

    coords = _attempt(
        f"postal code {postal}" + (f" in '{country}'" if country else ""),
        lambda: geocoder.search_postal(postal, country),
    )
    if coords:
        return coords

    if location.shape is PostalShape.AMBIGUOUS and country:
        coords = _attempt(
            f"international search for {postal}",
            lambda: geocoder.search_postal(postal, None),
        )
        if coords:
            return coords

    if location.shape is PostalShape.CANADA:
        proxy = canadian_proxy_city(postal)
        if proxy:
            city_name, prefix = proxy
            coords = _attempt(
                f"Canadian city lookup {city_name} (FSA: {prefix})",
                lambda: geocoder.search_place(city_name),
            )
            if coords:
                return coords

    return None


def resolve_coordinates(location: ClassifiedLocation, geocoder: NominatimGeocoder) -> Optional[Coordinates]:
    """
    Resolve a classified location to coordinates.

    ICAO codes are not resolved here; they go straight to the METAR path.

    Returns:
        Coordinates, or None if the location could not be resolved
    """
    if location.kind is LocationKind.NAMED_OUTPOST:
        return outpost_coordinates(location.value)
    if location.kind is LocationKind.ICAO_CODE:
        return None

    debug_logger.debug(f"Converting postal code {location.value} to coordinates...")
    return resolve_postal(location, geocoder)
