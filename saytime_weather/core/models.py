"""
Data models for location tokens, observations and announcement payloads.
Provides structured data classes instead of loose dicts passed between stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class LocationKind(Enum):
    """What a raw location token was classified as"""
    NAMED_OUTPOST = "outpost"
    ICAO_CODE = "icao"
    POSTAL_CODE = "postal"


class PostalShape(Enum):
    """Regional shape of a postal token"""
    AMBIGUOUS = "ambiguous"          # 5 digits: US, DE, FR, ...
    CANADA = "canada"                # A1A 1A1
    INTERNATIONAL = "international"  # anything else


class SourceKind(Enum):
    """Which provider family produced an observation"""
    GRIDDED_FORECAST = "openmeteo"
    AVIATION_REPORT = "metar"


class TemperatureUnit(Enum):
    """Display units"""
    FAHRENHEIT = "F"
    CELSIUS = "C"


@dataclass(frozen=True)
class Fahrenheit:
    """A temperature in degrees Fahrenheit, the canonical internal unit.

    Only the normalizer converts this to a display unit, so a value that
    went through the cache is never converted twice.
    """
    degrees: float

    @classmethod
    def from_celsius(cls, celsius: float) -> "Fahrenheit":
        """Build the canonical value from a Celsius reading at acquisition time."""
        return cls(celsius * 9 / 5 + 32)


@dataclass(frozen=True)
class Coordinates:
    """A resolved position in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ClassifiedLocation:
    """A location token tagged with its kind.

    ``value`` is the normalized form used for lookups (upper-cased ICAO
    code, outpost table key or stripped postal code); ``raw`` is the token
    exactly as supplied and is what the cache is keyed on.
    """
    raw: str
    kind: LocationKind
    value: str
    shape: Optional[PostalShape] = None
    country: str = ""

    @property
    def ambiguous(self) -> bool:
        return self.shape is PostalShape.AMBIGUOUS


@dataclass(frozen=True)
class WeatherObservation:
    """Current conditions for one location, as acquired."""
    temperature: Fahrenheit
    condition: str
    timezone: str = ""
    source: SourceKind = SourceKind.GRIDDED_FORECAST

    def to_dict(self) -> Dict[str, Any]:
        return {
            'temperature_f': self.temperature.degrees,
            'condition': self.condition,
            'timezone': self.timezone,
            'type': self.source.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherObservation":
        """
        Rebuild an observation from its cached form.

        Raises:
            KeyError, ValueError, TypeError: If the data is malformed
        """
        return cls(
            temperature=Fahrenheit(float(data['temperature_f'])),
            condition=str(data['condition']),
            timezone=str(data.get('timezone') or ''),
            source=SourceKind(data['type']),
        )


@dataclass(frozen=True)
class CacheEntry:
    """One stored observation with its freshness window."""
    key: str
    value: WeatherObservation
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'value': self.value.to_dict(),
            'stored_at': self.stored_at,
            'ttl': self.ttl,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(
            key=str(data['key']),
            value=WeatherObservation.from_dict(data['value']),
            stored_at=float(data['stored_at']),
            ttl=float(data['ttl']),
        )


@dataclass
class AnnouncementPayload:
    """What the announcement renderer consumes.

    ``temperature_display`` is None when the reading failed the sanity
    check; the announcement then carries the condition only.
    """
    temperature_display: Optional[int]
    unit: TemperatureUnit
    condition_asset_ids: List[str] = field(default_factory=list)
    timezone: str = ""
