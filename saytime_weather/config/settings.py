"""
Runtime configuration for weather lookups.

Settings come from an INI file (``[weather]`` section) with command-line
overrides layered on top. The result is an immutable ``WeatherConfig`` that
is passed explicitly through the pipeline.
"""

import configparser
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from common import logger as debug_logger
from common.paths import CONFIG_PATHS, TMP_DIR, WEATHER_SOUND_DIR
from saytime_weather.config.constants import DEFAULT_CACHE_DURATION, DEFAULT_COUNTRY, SUPPORTED_PROVIDERS
from saytime_weather.core.errors import ConfigError
from saytime_weather.core.models import TemperatureUnit

CONFIG_SECTION = "weather"

DEFAULT_CONFIG_TEXT = """\
; ============================================================================
; Weather Configuration for saytime-weather
; ============================================================================
; All settings have sensible defaults - no changes required to get started.
; Command line options override these settings for a single run.
; ============================================================================

[weather]

; Temperature display mode: F for Fahrenheit, C for Celsius
Temperature_mode = F

; Announce weather conditions (cloudy, rain, clear, ...). NO = temperature only
process_condition = YES

; Country for ambiguous 5-digit postal codes (ISO 3166-1 alpha-2: us, de, fr, ...)
; Leave blank to use us first; unmatched codes are retried in all countries
default_country = us

; Weather data provider (only openmeteo is supported)
weather_provider = openmeteo

; Cache weather results to reduce API calls
cache_enabled = YES

; Cache duration in seconds (1800 = 30 minutes)
cache_duration = 1800
"""


@dataclass(frozen=True)
class WeatherConfig:
    """Settings for one weather lookup."""

    temperature_mode: TemperatureUnit = TemperatureUnit.FAHRENHEIT
    process_condition: bool = True
    default_country: str = DEFAULT_COUNTRY
    weather_provider: str = "openmeteo"
    cache_enabled: bool = True
    cache_duration: int = DEFAULT_CACHE_DURATION

    sound_dir: Path = field(default_factory=lambda: WEATHER_SOUND_DIR)
    output_dir: Path = field(default_factory=lambda: TMP_DIR)


@dataclass(frozen=True)
class Overrides:
    """Per-run overrides taken from the command line."""

    force_country: Optional[str] = None
    force_unit: Optional[TemperatureUnit] = None
    bypass_cache: bool = False
    skip_condition_processing: bool = False


def _parse_bool(value: str) -> bool:
    return value.strip().upper() in ("YES", "Y", "TRUE", "ON", "1")


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_unit(value: str) -> TemperatureUnit:
    """
    Parse a temperature mode string.

    Raises:
        ConfigError: If the value is not F or C
    """
    try:
        return TemperatureUnit(value.strip().upper())
    except ValueError:
        raise ConfigError(f"Invalid Temperature_mode: {value!r} (expected F or C)") from None


def _new_parser() -> configparser.ConfigParser:
    return configparser.ConfigParser(
        interpolation=None,
        inline_comment_prefixes=(";", "#"),
        comment_prefixes=(";", "#"),
    )


def read_config_values(path: Path) -> Dict[str, str]:
    """
    Read raw key/value pairs from a weather INI file.

    Files without a section header are accepted; all keys land in the
    ``[weather]`` section. Keys are returned lower-cased.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    parser = _new_parser()
    try:
        try:
            parser.read_string(text, source=str(path))
        except configparser.MissingSectionHeaderError:
            parser = _new_parser()
            parser.read_string(f"[{CONFIG_SECTION}]\n{text}", source=str(path))
    except configparser.Error as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    if not parser.has_section(CONFIG_SECTION):
        # Fall back to the first section for hand-written files
        sections = parser.sections()
        if not sections:
            return {}
        return {k: _strip_quotes(v) for k, v in parser.items(sections[0])}
    return {k: _strip_quotes(v) for k, v in parser.items(CONFIG_SECTION)}


def write_default_config(candidates: List[Path]) -> Optional[Path]:
    """
    Create a commented default config file in the first creatable location.

    Returns:
        The path written, or None if no location was writable
    """
    for path in candidates:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
            path.chmod(0o644)
            debug_logger.info(f"Created default configuration file: {path}")
            return path
        except OSError as e:
            debug_logger.warning(f"Could not create config file {path}: {e}")
    return None


def config_from_values(values: Dict[str, str], **kwargs) -> WeatherConfig:
    """
    Build a WeatherConfig from raw INI values, applying defaults and validation.

    Args:
        values: Lower-cased keys as returned by read_config_values
        **kwargs: Extra WeatherConfig fields (sound_dir, output_dir)

    Raises:
        ConfigError: If Temperature_mode is invalid
    """
    defaults = WeatherConfig()

    mode = values.get("temperature_mode")
    temperature_mode = parse_unit(mode) if mode else defaults.temperature_mode

    cache_duration = defaults.cache_duration
    raw_duration = values.get("cache_duration")
    if raw_duration:
        if raw_duration.strip().isdigit():
            cache_duration = int(raw_duration)
        else:
            debug_logger.warning(f"Invalid cache_duration: {raw_duration}, using default")

    provider = (values.get("weather_provider") or defaults.weather_provider).strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        debug_logger.warning(f"Unsupported weather_provider: {provider}, using openmeteo")
        provider = defaults.weather_provider

    default_country = values.get("default_country", defaults.default_country)

    return WeatherConfig(
        temperature_mode=temperature_mode,
        process_condition=_parse_bool(values.get("process_condition", "YES")),
        default_country=default_country.strip().lower(),
        weather_provider=provider,
        cache_enabled=_parse_bool(values.get("cache_enabled", "YES")),
        cache_duration=cache_duration,
        **kwargs,
    )


def load_config(config_file: Optional[Path] = None, create_default: bool = True) -> WeatherConfig:
    """
    Load configuration from an explicit file or the standard search paths.

    Args:
        config_file: Use only this file (must exist)
        create_default: Write a default file when none of the search paths exist

    Returns:
        Validated WeatherConfig

    Raises:
        ConfigError: If an explicit file is missing or the contents are invalid
    """
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"Custom config file not found: {config_file}")
        return config_from_values(read_config_values(config_file))

    for path in CONFIG_PATHS:
        if path.is_file():
            debug_logger.debug(f"Using configuration file: {path}")
            return config_from_values(read_config_values(path))

    if create_default:
        write_default_config(CONFIG_PATHS)
    return WeatherConfig()


def apply_overrides(config: WeatherConfig, overrides: Overrides) -> WeatherConfig:
    """Return a copy of config with command-line overrides applied."""
    changes = {}
    if overrides.force_country is not None:
        changes["default_country"] = overrides.force_country.strip().lower()
    if overrides.force_unit is not None:
        changes["temperature_mode"] = overrides.force_unit
    if overrides.bypass_cache:
        changes["cache_enabled"] = False
    if overrides.skip_condition_processing:
        changes["process_condition"] = False
    return replace(config, **changes) if changes else config
