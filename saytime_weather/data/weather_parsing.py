"""
Weather parsing constants and utilities.

Turns raw METAR text and Open-Meteo WMO weather codes into a temperature
and a short spoken condition ("Rain", "Partly Cloudy", ...).
"""

import re
from typing import List, Optional, Tuple

from saytime_weather.core.models import Fahrenheit

# Temperature/dewpoint group: " 25/18 ", " M05/M10 ", " 05/M02 "
TEMPERATURE_PATTERN = re.compile(r'\s(M?\d{2})/(M?\d{2})(?=\s|$)')

# Report header: station identifier followed by the ddhhmmZ observation time
STATION_PATTERN = re.compile(r'^[A-Z][A-Z0-9]{3}$')
TIME_GROUP_PATTERN = re.compile(r'^\d{6}Z$')

# Present weather codes, scanned in order; first match wins.
# "-RA" also matches the Rain pattern, which is checked first.
PRECIPITATION_CONDITIONS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\bTS\b'), "Thunderstorm"),
    (re.compile(r'\+RA\b'), "Heavy Rain"),
    (re.compile(r'(-|VC)?RA\b'), "Rain"),
    (re.compile(r'-RA\b'), "Light Rain"),
    (re.compile(r'DZ\b'), "Drizzle"),
    (re.compile(r'SN\b'), "Snow"),
    (re.compile(r'PL\b'), "Sleet"),
    (re.compile(r'GR\b'), "Hail"),
    (re.compile(r'\bFG\b'), "Foggy"),
    (re.compile(r'BR\b'), "Mist"),
]

# Sky coverage, most to least cloud
SKY_CONDITIONS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\bOVC\d{3}\b'), "Overcast"),
    (re.compile(r'\bBKN\d{3}\b'), "Cloudy"),
    (re.compile(r'\bSCT\d{3}\b'), "Partly Cloudy"),
    (re.compile(r'\bFEW\d{3}\b'), "Clear"),
    (re.compile(r'\b(CLR|SKC)\b'), "Clear"),
]

DEFAULT_SKY_CONDITION = "Clear"

# Open-Meteo WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light Drizzle",
    53: "Drizzle",
    55: "Heavy Drizzle",
    56: "Light Freezing Drizzle",
    57: "Freezing Drizzle",
    61: "Light Rain",
    63: "Rain",
    65: "Heavy Rain",
    66: "Light Freezing Rain",
    67: "Freezing Rain",
    71: "Light Snow",
    73: "Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Light Showers",
    81: "Showers",
    82: "Heavy Showers",
    85: "Light Snow Showers",
    86: "Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Light Hail",
    99: "Thunderstorm with Hail",
}

UNKNOWN_CONDITION = "Unknown"


def _metar_number(value: str) -> int:
    """Convert a METAR temperature field ("M05", "18") to an integer."""
    if value.startswith('M'):
        return -int(value[1:])
    return int(value)


def parse_metar_temperature_c(metar: str) -> Optional[int]:
    """
    Extract the air temperature in Celsius from a METAR.

    Args:
        metar: Raw METAR string

    Returns:
        Temperature in whole degrees Celsius, or None if no temp/dewpoint group
    """
    if not metar:
        return None

    match = TEMPERATURE_PATTERN.search(metar)
    if match:
        return _metar_number(match.group(1))
    return None


def parse_metar_temperature(metar: str) -> Optional[Fahrenheit]:
    """
    Extract the air temperature from a METAR as the canonical Fahrenheit value.

    Args:
        metar: Raw METAR string

    Returns:
        Fahrenheit temperature, or None if the report has no temperature group
    """
    celsius = parse_metar_temperature_c(metar)
    if celsius is None:
        return None
    return Fahrenheit.from_celsius(celsius)


def metar_weather_body(metar: str) -> str:
    """
    Strip the report type, station identifier and remarks from a METAR.

    Station identifiers such as KMSN or CYSN would otherwise match the
    present weather codes. The first token only counts as a station
    identifier when the observation time follows it, so fragments like
    "TSRA OVC020" keep their first group.

    Args:
        metar: Raw METAR string

    Returns:
        The observation groups between the station identifier and RMK
    """
    parts = metar.split()
    if parts and parts[0] in ("METAR", "SPECI"):
        parts = parts[1:]
    if len(parts) > 1 and STATION_PATTERN.match(parts[0]) and TIME_GROUP_PATTERN.match(parts[1]):
        parts = parts[1:]

    body = []
    for part in parts:
        if part == "RMK":
            break
        body.append(part)
    return " ".join(body)


def parse_metar_condition(metar: str) -> str:
    """
    Derive a spoken condition from a METAR.

    Present weather codes take priority over sky coverage.

    Args:
        metar: Raw METAR string

    Returns:
        Condition text such as "Thunderstorm", "Rain" or "Overcast"
    """
    if not metar:
        return DEFAULT_SKY_CONDITION

    body = metar_weather_body(metar)

    for pattern, condition in PRECIPITATION_CONDITIONS:
        if pattern.search(body):
            return condition

    for pattern, condition in SKY_CONDITIONS:
        if pattern.search(body):
            return condition

    return DEFAULT_SKY_CONDITION


def weather_code_to_text(code: Optional[int]) -> str:
    """Map an Open-Meteo weather code to condition text ("Unknown" if unmapped)."""
    if code is None:
        return UNKNOWN_CONDITION
    try:
        return WEATHER_CODES.get(int(code), UNKNOWN_CONDITION)
    except (TypeError, ValueError):
        return UNKNOWN_CONDITION
