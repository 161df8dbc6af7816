"""
saytime-weather
Current temperature and condition lookup for spoken announcements.
"""

# Import pipeline entry points
from saytime_weather.core.pipeline import WeatherServices, announce, get_weather

# Import classification and resolution
from saytime_weather.core.classifier import classify
from saytime_weather.core.resolver import resolve_coordinates

# Import configuration
from saytime_weather.config.settings import Overrides, WeatherConfig, load_config

# Import data models and errors
from saytime_weather.core.models import (
    AnnouncementPayload,
    Coordinates,
    Fahrenheit,
    TemperatureUnit,
    WeatherObservation,
)
from saytime_weather.core.errors import ResolutionFailed, WeatherError

from saytime_weather.config.constants import VERSION

__version__ = VERSION

# Export public API
__all__ = [
    'WeatherServices',
    'announce',
    'get_weather',
    'classify',
    'resolve_coordinates',
    'Overrides',
    'WeatherConfig',
    'load_config',
    'AnnouncementPayload',
    'Coordinates',
    'Fahrenheit',
    'TemperatureUnit',
    'WeatherObservation',
    'ResolutionFailed',
    'WeatherError',
]
