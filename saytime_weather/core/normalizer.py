"""
Output-boundary normalization.

This is the only place a Fahrenheit temperature is converted to the
display unit. It also sanity-checks the displayed value and maps the
condition text to sound asset ids for the announcement renderer.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from common import logger as debug_logger
from saytime_weather.config.constants import (
    CELSIUS_RANGE, DEFAULT_CONDITION_ASSETS, FAHRENHEIT_RANGE, SOUND_FILE_EXTENSION
)
from saytime_weather.core.errors import NormalizationOutOfRange
from saytime_weather.core.models import AnnouncementPayload, Fahrenheit, TemperatureUnit, WeatherObservation


def fahrenheit_to_celsius(temperature: Fahrenheit) -> float:
    return (temperature.degrees - 32) * 5 / 9


def display_temperature(temperature: Fahrenheit, unit: TemperatureUnit) -> int:
    """Convert to the display unit and round to the nearest whole degree."""
    if unit is TemperatureUnit.CELSIUS:
        return round(fahrenheit_to_celsius(temperature))
    return round(temperature.degrees)


def check_range(value: int, unit: TemperatureUnit) -> int:
    """
    Validate a display temperature against the sanity bounds.

    Raises:
        NormalizationOutOfRange: If the value is outside the range for the unit
    """
    low, high = CELSIUS_RANGE if unit is TemperatureUnit.CELSIUS else FAHRENHEIT_RANGE
    if not low <= value <= high:
        raise NormalizationOutOfRange(
            f"Temperature {value}°{unit.value} outside [{low}, {high}]"
        )
    return value


class ExactMatch:
    """Every condition word that is itself an asset name."""
    name = "exact"

    def select(self, words: Sequence[str], assets: Sequence[str]) -> List[str]:
        available = set(assets)
        return [word for word in words if word in available]


class SubstringMatch:
    """Every asset whose name contains a condition word."""
    name = "substring"

    def select(self, words: Sequence[str], assets: Sequence[str]) -> List[str]:
        matches: List[str] = []
        for word in words:
            for asset in assets:
                if word in asset.lower() and asset not in matches:
                    matches.append(asset)
        return matches


class DefaultAsset:
    """The first generic fair-weather asset that exists."""
    name = "default"

    def __init__(self, defaults: Sequence[str] = DEFAULT_CONDITION_ASSETS):
        self.defaults = tuple(defaults)

    def select(self, words: Sequence[str], assets: Sequence[str]) -> List[str]:
        available = set(assets)
        for default in self.defaults:
            if default in available:
                return [default]
        return []


# Tried in order; the first strategy with any match wins
CONDITION_STRATEGIES = (ExactMatch(), SubstringMatch(), DefaultAsset())


def condition_words(condition: str) -> List[str]:
    return [word for word in condition.lower().split() if word]


def match_condition_assets(
    condition: str,
    assets: Sequence[str],
    strategies: Iterable = CONDITION_STRATEGIES,
) -> List[str]:
    """
    Pick sound assets for a condition string.

    Args:
        condition: Condition text such as "Light Rain"
        assets: Available asset ids (sound file stems)
        strategies: Ordered matching strategies

    Returns:
        Ordered asset ids; empty if nothing matched (temperature-only announcement)
    """
    words = condition_words(condition)
    for strategy in strategies:
        selected = strategy.select(words, assets)
        if selected:
            debug_logger.debug(f"  Condition '{condition}' matched {selected} ({strategy.name})")
            return selected
    debug_logger.warning(f"No weather condition sound files found for: {condition}")
    return []


def list_sound_assets(sound_dir: Path) -> List[str]:
    """
    List available condition sounds.

    Returns:
        Sorted file stems of *.ulaw files; empty if the directory is missing
    """
    try:
        return sorted(
            path.stem for path in Path(sound_dir).iterdir()
            if path.suffix == SOUND_FILE_EXTENSION and path.is_file()
        )
    except OSError as e:
        debug_logger.warning(f"Cannot open sound directory: {sound_dir} - {e}")
        return []


def build_announcement(
    observation: WeatherObservation,
    unit: TemperatureUnit,
    assets: Optional[Sequence[str]] = None,
    process_condition: bool = True,
) -> AnnouncementPayload:
    """
    Derive the renderer payload from an observation.

    An out-of-range temperature is logged and dropped; the rest of the
    payload is still produced.

    Args:
        observation: Acquired observation (Fahrenheit)
        unit: Display unit
        assets: Available condition asset ids
        process_condition: False skips condition matching entirely
    """
    temperature_display: Optional[int] = None
    try:
        temperature_display = check_range(display_temperature(observation.temperature, unit), unit)
    except NormalizationOutOfRange as e:
        debug_logger.error(str(e))

    asset_ids: List[str] = []
    if process_condition and observation.condition:
        asset_ids = match_condition_assets(observation.condition, assets or [])

    return AnnouncementPayload(
        temperature_display=temperature_display,
        unit=unit,
        condition_asset_ids=asset_ids,
        timezone=observation.timezone,
    )
