"""
Unit tests for the provider adapters.

HTTP calls are patched out: requests.get for Google and Nominatim, the
aiohttp session for Census.
"""

import threading
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
import requests

from geomany.geocoding import (
    STATUS_EXHAUSTED,
    STATUS_OK,
    CensusGeocoder,
    ConfigurationError,
    GeocodingError,
    GeocodingResponse,
    GoogleGeocoder,
    NominatimGeocoder,
    get_geocoder,
)


def http_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


NOMINATIM_MATCH = {
    "lat": "51.5226",
    "lon": "-0.1030",
    "display_name": "82, Clerkenwell Road, London, EC1M 5RF, United Kingdom",
    "boundingbox": ["51.5225", "51.5227", "-0.1031", "-0.1029"],
    "address": {"country": "United Kingdom", "postcode": "EC1M 5RF"},
}

GOOGLE_MATCH = {
    "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA 94043, USA",
    "geometry": {
        "location": {"lat": 37.4224, "lng": -122.0842},
        "viewport": {
            "southwest": {"lat": 37.4210, "lng": -122.0856},
            "northeast": {"lat": 37.4237, "lng": -122.0829},
        },
    },
    "address_components": [
        {"long_name": "Mountain View", "types": ["locality", "political"]},
        {"long_name": "United States", "types": ["country", "political"]},
    ],
}

CENSUS_MATCH = {
    "matchedAddress": "4600 SILVER HILL RD, WASHINGTON, DC, 20233",
    "coordinates": {"x": -76.9274, "y": 38.8457},
    "tigerLine": {"tigerLineId": "76355984", "side": "L"},
}


class TestNominatim:
    """Tests for NominatimGeocoder."""

    @pytest.mark.asyncio
    async def test_success(self):
        geocoder = NominatimGeocoder(user_agent="tests", daily_limit=1)
        with patch(
            "geomany.geocoding.providers.nominatim.requests.get",
            return_value=http_response(200, [NOMINATIM_MATCH]),
        ) as mock_get:
            reply = await geocoder.geocode("82 Clerkenwell Road, London")

        assert reply.status_code == STATUS_OK
        assert reply.records == [NOMINATIM_MATCH]
        _, kwargs = mock_get.call_args
        assert kwargs["params"]["q"] == "82 Clerkenwell Road, London"
        assert kwargs["headers"]["User-Agent"] == "tests"

    def test_normalize(self):
        normalized = NominatimGeocoder(user_agent="tests").normalize(NOMINATIM_MATCH)

        assert normalized["latitude"] == "51.5226"
        assert normalized["longitude"] == "-0.1030"
        assert normalized["country"] == "United Kingdom"
        assert normalized["precision"] == 1.0

    def test_normalize_wide_bbox(self):
        raw = dict(NOMINATIM_MATCH, boundingbox=["49.0", "59.0", "-8.0", "2.0"])
        normalized = NominatimGeocoder(user_agent="tests").normalize(raw)
        assert 0.0 <= normalized["precision"] < 0.3

    @pytest.mark.asyncio
    async def test_request_runs_off_the_event_loop_thread(self):
        threads = []

        def fake_get(*args, **kwargs):
            threads.append(threading.get_ident())
            return http_response(200, [NOMINATIM_MATCH])

        geocoder = NominatimGeocoder(user_agent="tests")
        with patch("geomany.geocoding.providers.nominatim.requests.get", side_effect=fake_get):
            reply = await geocoder.geocode("82 Clerkenwell Road, London")

        assert reply.status_code == STATUS_OK
        assert threads and threads[0] != threading.get_ident()

    def test_normalize_without_bbox(self):
        raw = {k: v for k, v in NOMINATIM_MATCH.items() if k != "boundingbox"}
        normalized = NominatimGeocoder(user_agent="tests").normalize(raw)
        assert normalized["precision"] is None

    @pytest.mark.asyncio
    async def test_no_results(self):
        geocoder = NominatimGeocoder(user_agent="tests")
        with patch(
            "geomany.geocoding.providers.nominatim.requests.get",
            return_value=http_response(200, []),
        ):
            reply = await geocoder.geocode("atlantis")

        assert reply.status_code == STATUS_OK
        assert reply.records == []

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        geocoder = NominatimGeocoder(user_agent="tests")
        with patch(
            "geomany.geocoding.providers.nominatim.requests.get",
            return_value=http_response(429),
        ):
            reply = await geocoder.geocode("somewhere")

        assert reply.status_code == STATUS_EXHAUSTED

    @pytest.mark.asyncio
    async def test_timeout(self):
        geocoder = NominatimGeocoder(user_agent="tests")
        with patch(
            "geomany.geocoding.providers.nominatim.requests.get",
            side_effect=requests.Timeout(),
        ):
            reply = await geocoder.geocode("somewhere")

        assert reply.status_code == 504

    @pytest.mark.asyncio
    async def test_connection_error(self):
        geocoder = NominatimGeocoder(user_agent="tests")
        with patch(
            "geomany.geocoding.providers.nominatim.requests.get",
            side_effect=requests.ConnectionError("refused"),
        ):
            reply = await geocoder.geocode("somewhere")

        assert reply.status_code == 503

    def test_response_envelope(self):
        geocoder = NominatimGeocoder(user_agent="tests")
        from geomany.geocoding.base import ProviderReply

        response = GeocodingResponse.from_reply(
            "82 Clerkenwell Road", geocoder, ProviderReply(records=[NOMINATIM_MATCH])
        )

        assert response.status_code == STATUS_OK
        assert response.first.provider == "nominatim"
        assert response.first.latitude == 51.5226


class TestGoogle:
    """Tests for GoogleGeocoder."""

    @pytest.mark.asyncio
    async def test_success(self):
        geocoder = GoogleGeocoder(api_key="test-key")
        with patch(
            "geomany.geocoding.providers.google.requests.get",
            return_value=http_response(200, {"status": "OK", "results": [GOOGLE_MATCH]}),
        ) as mock_get:
            reply = await geocoder.geocode("1600 Amphitheatre Parkway")

        assert reply.status_code == STATUS_OK
        assert reply.records == [GOOGLE_MATCH]
        _, kwargs = mock_get.call_args
        assert kwargs["params"]["key"] == "test-key"

    def test_normalize(self):
        normalized = GoogleGeocoder(api_key="test-key").normalize(GOOGLE_MATCH)

        assert normalized["latitude"] == 37.4224
        assert normalized["longitude"] == -122.0842
        assert normalized["country"] == "United States"
        assert 0.5 < normalized["precision"] <= 1.0

    @pytest.mark.asyncio
    async def test_request_runs_off_the_event_loop_thread(self):
        threads = []

        def fake_get(*args, **kwargs):
            threads.append(threading.get_ident())
            return http_response(200, {"status": "OK", "results": [GOOGLE_MATCH]})

        geocoder = GoogleGeocoder(api_key="test-key")
        with patch("geomany.geocoding.providers.google.requests.get", side_effect=fake_get):
            reply = await geocoder.geocode("1600 Amphitheatre Parkway")

        assert reply.status_code == STATUS_OK
        assert threads and threads[0] != threading.get_ident()

    def test_normalize_without_viewport(self):
        raw = {"geometry": {"location": {"lat": 1.0, "lng": 2.0}}}
        normalized = GoogleGeocoder(api_key="test-key").normalize(raw)
        assert normalized["precision"] is None
        assert normalized["country"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [
        ("ZERO_RESULTS", STATUS_OK),
        ("OVER_QUERY_LIMIT", STATUS_EXHAUSTED),
        ("REQUEST_DENIED", 403),
        ("UNKNOWN_ERROR", 500),
    ])
    async def test_api_status(self, status, expected):
        geocoder = GoogleGeocoder(api_key="test-key")
        with patch(
            "geomany.geocoding.providers.google.requests.get",
            return_value=http_response(200, {"status": status, "results": []}),
        ):
            reply = await geocoder.geocode("somewhere")

        assert reply.status_code == expected
        assert reply.records == []

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        geocoder = GoogleGeocoder(api_key="")
        geocoder.api_key = ""
        with pytest.raises(GeocodingError):
            await geocoder.geocode("somewhere")


def census_session(status=200, payload=None):
    """Mock aiohttp.ClientSession whose get() yields one response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    session = MagicMock()
    session.get.return_value.__aenter__.return_value = response

    session_class = MagicMock()
    session_class.return_value.__aenter__.return_value = session
    return session_class


class TestCensus:
    """Tests for CensusGeocoder."""

    @pytest.mark.asyncio
    async def test_success(self):
        session_class = census_session(
            200, {"result": {"addressMatches": [CENSUS_MATCH]}}
        )
        with patch("geomany.geocoding.providers.census.aiohttp.ClientSession", session_class), \
                patch("geomany.geocoding.providers.census.aiohttp.TCPConnector"):
            reply = await CensusGeocoder().geocode("4600 Silver Hill Rd, Washington, DC")

        assert reply.status_code == STATUS_OK
        assert reply.records == [CENSUS_MATCH]

    @pytest.mark.asyncio
    async def test_no_match(self):
        session_class = census_session(200, {"result": {"addressMatches": []}})
        with patch("geomany.geocoding.providers.census.aiohttp.ClientSession", session_class), \
                patch("geomany.geocoding.providers.census.aiohttp.TCPConnector"):
            reply = await CensusGeocoder().geocode("atlantis")

        assert reply.status_code == STATUS_OK
        assert reply.records == []

    @pytest.mark.asyncio
    async def test_http_error(self):
        session_class = census_session(500)
        with patch("geomany.geocoding.providers.census.aiohttp.ClientSession", session_class), \
                patch("geomany.geocoding.providers.census.aiohttp.TCPConnector"):
            reply = await CensusGeocoder().geocode("somewhere")

        assert reply.status_code == 500

    @pytest.mark.asyncio
    async def test_client_error(self):
        session_class = MagicMock(side_effect=aiohttp.ClientError("boom"))
        with patch("geomany.geocoding.providers.census.aiohttp.ClientSession", session_class), \
                patch("geomany.geocoding.providers.census.aiohttp.TCPConnector"):
            reply = await CensusGeocoder().geocode("somewhere")

        assert reply.status_code == 503

    def test_normalize(self):
        normalized = CensusGeocoder().normalize(CENSUS_MATCH)

        assert normalized["latitude"] == 38.8457
        assert normalized["longitude"] == -76.9274
        assert normalized["country"] == "United States"
        assert normalized["precision"] == 1.0

    def test_normalize_without_tiger_line(self):
        raw = {k: v for k, v in CENSUS_MATCH.items() if k != "tigerLine"}
        assert CensusGeocoder().normalize(raw)["precision"] == 0.8


class TestFactory:
    """Tests for provider lookup by name."""

    def test_known_providers(self):
        assert isinstance(get_geocoder("census"), CensusGeocoder)
        assert isinstance(get_geocoder("nominatim", user_agent="tests"), NominatimGeocoder)
        assert isinstance(get_geocoder("google", api_key="k"), GoogleGeocoder)

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            get_geocoder("mapquest")

    def test_default_daily_limits_from_settings(self):
        from geomany.core import settings

        assert get_geocoder("census").daily_limit == settings.CENSUS_DAILY_LIMIT
        assert get_geocoder("nominatim").daily_limit == settings.NOMINATIM_DAILY_LIMIT
