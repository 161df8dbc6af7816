"""
Configuration constants and settings for saytime-weather.
"""

VERSION = "2.8.0"

# Provider endpoints
OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
AVIATIONWEATHER_METAR_URL = "https://aviationweather.gov/api/data/metar"
NWS_METAR_STATION_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{icao}.TXT"

USER_AGENT = "Mozilla/5.0 (compatible; WeatherBot/1.0; +https://github.com/w5gle/saytime-weather)"

# Request timeouts (in seconds)
GEOCODING_TIMEOUT = 10
WEATHER_TIMEOUT = 15

# Nominatim usage policy: at most one request per second
GEOCODING_MIN_INTERVAL = 1.0

# Country for ambiguous 5-digit postal codes when none is configured
DEFAULT_COUNTRY = "us"

# Cache duration settings (in seconds)
DEFAULT_CACHE_DURATION = 1800
CACHE_PURGE_INTERVAL = 3600
MEMORY_CACHE_SIZE = 256

# Display sanity bounds, inclusive
FAHRENHEIT_RANGE = (-100, 150)
CELSIUS_RANGE = (-60, 60)

# Tried in order when no condition word has a matching sound
DEFAULT_CONDITION_ASSETS = ("clear", "sunny", "fair")

SOUND_FILE_EXTENSION = ".ulaw"

SUPPORTED_PROVIDERS = ("openmeteo",)
