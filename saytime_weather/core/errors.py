"""
Error kinds raised by the weather pipeline.

Provider call sites convert network and decode failures into these so
that nothing escapes as an unhandled ``requests``, geopy or JSON error.
"""


class WeatherError(Exception):
    """Base class for all pipeline errors."""


class ResolutionFailed(WeatherError):
    """No coordinates or station data could be found for a location."""


class SourceFetchFailed(WeatherError):
    """A single provider failed; the caller moves on to the next fallback."""


class NormalizationOutOfRange(WeatherError):
    """A display temperature fell outside the sanity bounds."""


class CacheUnavailable(WeatherError):
    """No usable cache directory; the pipeline runs uncached."""


class ConfigError(WeatherError):
    """The configuration file or an override is invalid."""
