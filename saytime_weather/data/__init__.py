"""
Provider clients for geocoding, gridded forecasts and aviation reports.
"""

from .aviation import MetarClient
from .forecast import OpenMeteoClient
from .geocoding import NominatimGeocoder

__all__ = ['MetarClient', 'OpenMeteoClient', 'NominatimGeocoder']
