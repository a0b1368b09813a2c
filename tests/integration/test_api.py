"""
Integration tests for the geomany API.

Runs the FastAPI app in-process with the shared geocoder replaced by one
over fake providers.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_geocoder_many
from api.main import app
from geomany.geocoding import GeocoderMany, MemoryCache
from tests.conftest import FakeGeocoder, record, reply


@pytest.fixture
def geocoder():
    many = GeocoderMany(scheduler_type="OrderedList", cache=MemoryCache(), cache_misses=False)
    many.add_geocoder(
        FakeGeocoder("osm", [reply(record(51.5226, -0.103, precision=0.9,
                                          country="United Kingdom",
                                          address="82 Clerkenwell Road"))]),
        daily_limit=2,
    )
    many.add_geocoder(FakeGeocoder("census"), daily_limit=1)
    return many


@pytest.fixture
def client(geocoder):
    app.dependency_overrides[get_geocoder_many] = lambda: geocoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    """Tests for health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_reports_providers(self, client):
        response = client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["scheduler"] == "OrderedList"
        assert data["providers"]["osm"] == {"available": True, "consecutive_failures": 0}
        assert set(data["providers"]) == {"osm", "census"}


class TestGeocodeEndpoint:
    """Tests for /api/geocode."""

    def test_get(self, client):
        response = client.get("/api/geocode", params={"location": "82 Clerkenwell Road"})
        data = response.json()

        assert response.status_code == 200
        assert data["status_code"] == 200
        assert data["result"]["provider"] == "osm"
        assert data["result"]["latitude"] == 51.5226
        assert data["result"]["country"] == "United Kingdom"
        assert data["attempts"] == [{"provider": "osm", "status_code": 200, "results": 1}]

    def test_second_request_served_from_cache(self, client):
        client.get("/api/geocode", params={"location": "82 Clerkenwell Road"})
        response = client.get("/api/geocode", params={"location": "82 Clerkenwell Road"})
        data = response.json()

        assert data["status_code"] == 210
        assert data["attempts"] == []
        assert data["result"]["address"] == "82 Clerkenwell Road"

    def test_post_with_skip(self, client):
        response = client.post(
            "/api/geocode",
            json={"location": "82 Clerkenwell Road", "skip": ["osm"], "no_cache": True},
        )
        data = response.json()

        assert response.status_code == 200
        assert data["status_code"] == 401
        assert data["result"] is None
        assert [a["provider"] for a in data["attempts"]] == ["census"]

    def test_get_with_skip_list(self, client):
        response = client.get(
            "/api/geocode",
            params=[("location", "somewhere"), ("skip", "osm"), ("skip", "census")],
        )
        assert response.json()["status_code"] == 402

    def test_missing_location(self, client):
        assert client.get("/api/geocode").status_code == 422
        assert client.post("/api/geocode", json={"location": ""}).status_code == 422

    def test_blank_location(self, client):
        response = client.get("/api/geocode", params={"location": "   "})
        assert response.status_code == 400

    def test_no_providers(self, client):
        app.dependency_overrides[get_geocoder_many] = lambda: GeocoderMany()
        response = client.get("/api/geocode", params={"location": "London"})
        assert response.status_code == 503
