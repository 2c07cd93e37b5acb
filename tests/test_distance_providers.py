"""Tests for distance providers."""

import pytest
import requests

from backoffice.providers import (
    FixedDistanceProvider,
    GeocodingDistanceProvider,
    StaticDistanceProvider,
    get_distance_provider,
)
from backoffice.providers.geocoding import GeocodingError, haversine_km


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.payload


COORDS = {
    "New York, NY, USA": {"lat": "40.7128", "lon": "-74.0060"},
    "Los Angeles, CA, USA": {"lat": "34.0522", "lon": "-118.2437"},
}


class TestStaticProvider:
    def test_deterministic(self):
        provider = StaticDistanceProvider()
        assert provider.distance_km("abc", "abcdef") == provider.distance_km("abc", "abcdef")

    def test_formula(self):
        provider = StaticDistanceProvider()
        # |3 - 6| * 100 = 300 -> 50 + 300
        assert provider.distance_km("abc", "abcdef") == 350.0

    def test_same_length_is_floor(self):
        assert StaticDistanceProvider().distance_km("abcd", "wxyz") == 50.0

    def test_range(self):
        provider = StaticDistanceProvider()
        for n in range(0, 40):
            assert 50 <= provider.distance_km("x" * n, "") < 1000


class TestFactory:
    def test_static(self):
        assert isinstance(get_distance_provider("static"), StaticDistanceProvider)

    def test_geocoding(self):
        assert isinstance(get_distance_provider("geocoding"), GeocodingDistanceProvider)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_distance_provider("teleport")

    def test_fixed(self):
        assert FixedDistanceProvider(42.0).distance_km("a", "b") == 42.0


class TestGeocodingProvider:
    def test_haversine_ny_la(self):
        km = haversine_km(40.7128, -74.0060, 34.0522, -118.2437)
        assert 3930 < km < 3950

    def test_distance_between_geocoded_addresses(self, monkeypatch):
        provider = GeocodingDistanceProvider(base_url="http://geo.test/")
        calls = []

        def fake_get(url, params=None, timeout=None):
            calls.append((url, params["q"]))
            return FakeResponse([COORDS[params["q"]]])

        monkeypatch.setattr(provider.session, "get", fake_get)

        km = provider.distance_km("New York, NY, USA", "Los Angeles, CA, USA")

        assert 3930 < km < 3950
        assert calls[0] == ("http://geo.test/search", "New York, NY, USA")
        assert len(calls) == 2

    def test_unknown_address(self, monkeypatch):
        provider = GeocodingDistanceProvider(base_url="http://geo.test")
        monkeypatch.setattr(provider.session, "get", lambda *a, **kw: FakeResponse([]))

        with pytest.raises(GeocodingError):
            provider.distance_km("nowhere", "New York, NY, USA")

    def test_retries_transient_errors(self, monkeypatch):
        provider = GeocodingDistanceProvider(base_url="http://geo.test")
        attempts = {"n": 0}

        def flaky_get(url, params=None, timeout=None):
            attempts["n"] += 1
            if attempts["n"] < 2:
                raise requests.ConnectionError("connection reset")
            return FakeResponse([COORDS[params["q"]]])

        monkeypatch.setattr(provider.session, "get", flaky_get)

        lat, lon = provider.geocode("New York, NY, USA")

        assert (lat, lon) == (40.7128, -74.0060)
        assert attempts["n"] == 2
