"""
Location token classification.

Tags a raw token as a named outpost, an ICAO station code or a postal code
of a given regional shape. No network I/O happens here and classification
never fails: unrecognized shapes pass through as international postal codes
and are left for the resolver to accept or reject.
"""

import re

from common import logger as debug_logger
from saytime_weather.config.constants import DEFAULT_COUNTRY
from saytime_weather.core.locations import find_outpost
from saytime_weather.core.models import ClassifiedLocation, LocationKind, PostalShape

# ICAO region prefixes: every letter except X is allocated
ICAO_PATTERN = re.compile(r'^[A-Z]{4}$', re.IGNORECASE)
ICAO_REGION_PREFIXES = frozenset("ABCDEFGHIJKLMNOPQRSTUVWYZ")

FIVE_DIGIT_PATTERN = re.compile(r'^\d{5}$')
CANADIAN_PATTERN = re.compile(r'^([A-Z]\d[A-Z])\s?(\d[A-Z]\d)$', re.IGNORECASE)


def is_icao_code(token: str) -> bool:
    """Check if a token looks like a 4-letter ICAO station identifier."""
    if not ICAO_PATTERN.match(token):
        return False
    return token[0].upper() in ICAO_REGION_PREFIXES


def normalize_canadian_postal(token: str) -> str:
    """Canonical "A1A 1A1" form of a Canadian postal code."""
    compact = re.sub(r'\s+', '', token).upper()
    return f"{compact[:3]} {compact[3:]}"


def classify(token: str, default_country: str = "") -> ClassifiedLocation:
    """
    Classify a raw location token.

    Rules are applied in priority order: named outpost, ICAO code, 5-digit
    postal code, Canadian postal code, anything else.

    Args:
        token: Location token as supplied by the user
        default_country: Country hint for ambiguous 5-digit codes
                        (the configured default or a forced override);
                        blank falls back to DEFAULT_COUNTRY

    Returns:
        ClassifiedLocation keyed on the raw token
    """
    stripped = token.strip()

    outpost = find_outpost(stripped)
    if outpost:
        return ClassifiedLocation(token, LocationKind.NAMED_OUTPOST, outpost)

    if is_icao_code(stripped):
        return ClassifiedLocation(token, LocationKind.ICAO_CODE, stripped.upper())

    if FIVE_DIGIT_PATTERN.match(stripped):
        # A blank setting still searches the default country first
        country = default_country.strip().lower() or DEFAULT_COUNTRY
        debug_logger.debug(
            f"Ambiguous 5-digit postal code {stripped}, "
            f"assuming country '{country}'"
        )
        return ClassifiedLocation(
            token, LocationKind.POSTAL_CODE, stripped,
            shape=PostalShape.AMBIGUOUS, country=country,
        )

    if CANADIAN_PATTERN.match(stripped):
        return ClassifiedLocation(
            token, LocationKind.POSTAL_CODE, normalize_canadian_postal(stripped),
            shape=PostalShape.CANADA, country="ca",
        )

    return ClassifiedLocation(
        token, LocationKind.POSTAL_CODE, stripped,
        shape=PostalShape.INTERNATIONAL,
    )
