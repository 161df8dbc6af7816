"""
Static location tables.

Named outposts are remote places without postal codes (research stations,
DXpedition islands). Canadian FSA tables map Forward Sortation Areas to a
proxy city for when the geocoder has no entry for the full postal code.
"""

import re
from typing import Dict, Optional, Tuple

# key -> (latitude, longitude, display name)
# Keys are upper-case with spaces and punctuation removed
NAMED_OUTPOSTS: Dict[str, Tuple[float, float, str]] = {
    # Antarctic research stations
    'SOUTHPOLE': (-90.0, 0.0, 'South Pole Station, Antarctica'),
    'MCMURDO': (-77.85, 166.67, 'McMurdo Station, Antarctica'),
    'PALMER': (-64.77, -64.05, 'Palmer Station, Antarctica'),
    'VOSTOK': (-78.46, 106.84, 'Vostok Station, Antarctica'),
    'CASEY': (-66.28, 110.53, 'Casey Station, Antarctica'),
    'DAVIS': (-68.58, 77.97, 'Davis Station, Antarctica'),
    'MAWSON': (-67.60, 62.87, 'Mawson Station, Antarctica'),
    'ROTHERA': (-67.57, -68.13, 'Rothera Research Station, Antarctica'),
    'HALLEY': (-75.58, -26.66, 'Halley Research Station, Antarctica'),
    'CONCORDIA': (-75.10, 123.33, 'Concordia Station, Antarctica'),
    'SCOTTBASE': (-77.85, 166.76, 'Scott Base, Antarctica'),
    # DXpedition islands
    'HEARD': (-53.10, 73.52, 'Heard Island'),
    'BOUVET': (-54.42, 3.36, 'Bouvet Island'),
    'PETERI': (-68.85, -90.58, 'Peter I Island'),
    'CLIPPERTON': (10.30, -109.22, 'Clipperton Island'),
    'KERGUELEN': (-49.35, 70.22, 'Kerguelen Islands'),
    'SOUTHGEORGIA': (-54.28, -36.49, 'South Georgia'),
    'MACQUARIE': (-54.50, 158.94, 'Macquarie Island'),
    'AMSTERDAM': (-37.83, 77.56, 'Amsterdam Island'),
}

# 3-character FSAs with a specific proxy city
CANADIAN_FSA_CITIES: Dict[str, str] = {
    'N7L': 'Chatham-Kent, Ontario',
    'N7M': 'Sarnia, Ontario',
    'N7T': 'Sarnia, Ontario',
    **{fsa: 'London, Ontario' for fsa in (
        'N6A', 'N6B', 'N6C', 'N6E', 'N6G', 'N6H', 'N6J', 'N6K',
    )},
    **{fsa: 'Windsor, Ontario' for fsa in (
        'N8A', 'N8H', 'N8N', 'N8P', 'N8R', 'N8S', 'N8T', 'N8V', 'N8W',
        'N8X', 'N8Y', 'N9A', 'N9B', 'N9C', 'N9E', 'N9G', 'N9H', 'N9J',
        'N9K', 'N9Y',
    )},
    **{fsa: 'Guelph, Ontario' for fsa in ('N1G', 'N1H', 'N1K', 'N1L')},
    **{fsa: 'Cambridge, Ontario' for fsa in ('N3C', 'N3E', 'N3H')},
    **{fsa: 'Kitchener, Ontario' for fsa in (
        'N2C', 'N2E', 'N2G', 'N2H', 'N2J', 'N2K', 'N2L', 'N2M', 'N2N',
        'N2P', 'N2R',
    )},
}

# Leading letter of the postal code -> major city of that postal district
CANADIAN_REGION_CITIES: Dict[str, str] = {
    'A': 'St. Johns, Newfoundland',
    'B': 'Halifax, Nova Scotia',
    'C': 'Charlottetown, Prince Edward Island',
    'E': 'Moncton, New Brunswick',
    'G': 'Quebec City, Quebec',
    'H': 'Montreal, Quebec',
    'J': 'Gatineau, Quebec',
    'K': 'Ottawa, Ontario',
    'L': 'Mississauga, Ontario',
    'M': 'Toronto, Ontario',
    'N': 'London, Ontario',
    'P': 'Thunder Bay, Ontario',
    'R': 'Winnipeg, Manitoba',
    'S': 'Regina, Saskatchewan',
    'T': 'Calgary, Alberta',
    'V': 'Vancouver, British Columbia',
    'X': 'Whitehorse, Yukon',
    'Y': 'Whitehorse, Yukon',
}


def outpost_key(token: str) -> str:
    """Normalize a token for outpost lookup ("South Pole" -> "SOUTHPOLE")."""
    return re.sub(r'[^A-Z0-9]', '', token.upper())


def find_outpost(token: str) -> Optional[str]:
    """Return the outpost table key for a token, or None."""
    key = outpost_key(token)
    return key if key in NAMED_OUTPOSTS else None


def canadian_proxy_city(postal_code: str) -> Optional[Tuple[str, str]]:
    """
    Find a proxy city for a normalized Canadian postal code.

    The 3-character FSA table is consulted before the single-letter table.

    Returns:
        (city name, matched prefix) or None if neither table has an entry
    """
    fsa = postal_code[:3].upper()
    if fsa in CANADIAN_FSA_CITIES:
        return CANADIAN_FSA_CITIES[fsa], fsa
    letter = fsa[:1]
    if letter in CANADIAN_REGION_CITIES:
        return CANADIAN_REGION_CITIES[letter], letter
    return None
