"""
Tests for the HTTP provider clients (Nominatim, Open-Meteo, METAR).

Sessions and the geopy geolocator are mocked; no network access.
"""

from unittest.mock import MagicMock

import pytest
import requests
from geopy.exc import GeocoderTimedOut, GeocoderUnavailable

from saytime_weather.config.constants import NWS_METAR_STATION_URL, USER_AGENT
from saytime_weather.core.errors import SourceFetchFailed
from saytime_weather.core.models import Coordinates, SourceKind
from saytime_weather.data.aviation import MetarClient, observation_from_metar
from saytime_weather.data.forecast import OpenMeteoClient, observation_from_open_meteo
from saytime_weather.data.geocoding import NominatimGeocoder


def make_response(text="", json_data=None, status_error=None):
    response = MagicMock()
    response.text = text
    response.json.return_value = json_data
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


def make_session(*responses):
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = list(responses)
    return session


def make_location(latitude, longitude, address=""):
    return MagicMock(latitude=latitude, longitude=longitude, address=address)


class TestNominatimGeocoder:

    def make_geocoder(self, *results):
        geolocator = MagicMock()
        geolocator.geocode.side_effect = list(results)
        return NominatimGeocoder(geolocator=geolocator, min_delay_seconds=0), geolocator

    def test_postal_search_with_country(self):
        geocoder, geolocator = self.make_geocoder(make_location(29.42, -95.24, "Alvin, Texas"))
        assert geocoder.search_postal("77511", "us") == Coordinates(29.42, -95.24)
        geolocator.geocode.assert_called_once_with(
            {'postalcode': '77511'}, exactly_one=True, country_codes='us'
        )

    def test_postal_search_without_country(self):
        geocoder, geolocator = self.make_geocoder(None)
        assert geocoder.search_postal("75001") is None
        geolocator.geocode.assert_called_once_with({'postalcode': '75001'}, exactly_one=True)

    def test_uk_maps_to_iso_code(self):
        geocoder, geolocator = self.make_geocoder(None)
        geocoder.search_postal("SW1A 1AA", "UK")
        assert geolocator.geocode.call_args.kwargs['country_codes'] == 'gb'

    def test_place_search(self):
        geocoder, geolocator = self.make_geocoder(make_location(42.97, -82.40))
        assert geocoder.search_place("Sarnia, Ontario") == Coordinates(42.97, -82.40)
        geolocator.geocode.assert_called_once_with("Sarnia, Ontario", exactly_one=True)

    def test_service_error_is_not_retried(self):
        geocoder, geolocator = self.make_geocoder(GeocoderTimedOut("slow"), make_location(0, 0))
        with pytest.raises(SourceFetchFailed):
            geocoder.search_postal("77511", "us")
        assert geolocator.geocode.call_count == 1

    def test_unavailable_service(self):
        geocoder, _ = self.make_geocoder(GeocoderUnavailable("down"))
        with pytest.raises(SourceFetchFailed):
            geocoder.search_place("Nowhere")

    def test_one_request_per_second_by_default(self):
        geocoder = NominatimGeocoder(geolocator=MagicMock())
        assert geocoder._geocode.min_delay_seconds == 1.0

    def test_default_geolocator(self):
        geocoder = NominatimGeocoder(timeout=7)
        assert geocoder.geolocator.headers['User-Agent'] == USER_AGENT
        assert geocoder.geolocator.timeout == 7


class TestOpenMeteoClient:

    RESPONSE = {
        'timezone': 'America/Chicago',
        'current_weather': {'temperature': 71.6, 'weathercode': 2},
    }

    def test_fetch(self):
        session = make_session(make_response(json_data=self.RESPONSE))
        observation = OpenMeteoClient(session=session).fetch(Coordinates(29.42, -95.24))

        assert observation.temperature.degrees == 71.6
        assert observation.condition == "Partly Cloudy"
        assert observation.timezone == "America/Chicago"
        assert observation.source is SourceKind.GRIDDED_FORECAST

        params = session.get.call_args.kwargs['params']
        assert params['temperature_unit'] == 'fahrenheit'
        assert params['current_weather'] == 'true'
        assert params['timezone'] == 'auto'

    def test_timeout(self):
        session = make_session(requests.Timeout("slow"))
        with pytest.raises(SourceFetchFailed):
            OpenMeteoClient(session=session).fetch(Coordinates(0, 0))

    def test_http_error(self):
        session = make_session(make_response(status_error=requests.HTTPError("500")))
        with pytest.raises(SourceFetchFailed):
            OpenMeteoClient(session=session).fetch(Coordinates(0, 0))

    def test_missing_current_weather(self):
        with pytest.raises(SourceFetchFailed):
            observation_from_open_meteo({'timezone': 'UTC'})

    def test_unknown_code_and_missing_timezone(self):
        observation = observation_from_open_meteo({'current_weather': {'temperature': 10}})
        assert observation.condition == "Unknown"
        assert observation.timezone == ""


class TestMetarClient:

    REPORT = "KJFK 121651Z 31008KT 10SM OVC020 05/M02 A3012"

    def test_primary_source(self):
        session = make_session(make_response(text=self.REPORT + "\nKJFK 121551Z ...\n"))
        assert MetarClient(session=session).fetch("kjfk") == self.REPORT

        params = session.get.call_args.kwargs['params']
        assert params == {'ids': 'KJFK', 'format': 'raw', 'hours': 0, 'taf': 'false'}

    def test_falls_back_to_nws(self):
        session = make_session(
            make_response(text="No METAR found for KJFK"),
            make_response(text="2024/01/12 16:51\n" + self.REPORT + "\n"),
        )
        assert MetarClient(session=session).fetch("KJFK") == self.REPORT
        assert session.get.call_args.args[0] == NWS_METAR_STATION_URL.format(icao="KJFK")

    def test_primary_error_falls_back(self):
        session = make_session(
            requests.ConnectionError("down"),
            make_response(text="2024/01/12 16:51\n" + self.REPORT),
        )
        assert MetarClient(session=session).fetch("KJFK") == self.REPORT

    def test_both_sources_empty(self):
        session = make_session(
            make_response(text=""),
            make_response(status_error=requests.HTTPError("404")),
        )
        with pytest.raises(SourceFetchFailed):
            MetarClient(session=session).fetch("KZZZ")

    def test_observation_from_metar(self):
        observation = observation_from_metar(self.REPORT)
        assert observation.temperature.degrees == pytest.approx(41.0)
        assert observation.condition == "Overcast"
        assert observation.timezone == ""
        assert observation.source is SourceKind.AVIATION_REPORT

    def test_report_without_temperature(self):
        with pytest.raises(SourceFetchFailed):
            observation_from_metar("KJFK 121651Z 31008KT 10SM OVC020 A3012")
