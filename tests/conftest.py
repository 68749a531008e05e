# shared fakes: an in-memory provider in place of the http client and a controllable clock

import copy
import threading
from typing import Any, Dict, List, Tuple

import pytest

from cityweather.errors import TransportError


class FakeClient:
    # same surface as OpenWeatherClient.geocode / current_weather, no network

    def __init__(self):
        self.geo: Dict[str, List[Dict[str, Any]]] = {}
        self.weather: Dict[Tuple[float, float], Dict[str, Any]] = {}
        self.failing = set()
        self.geo_calls: List[str] = []
        self.weather_calls: List[Tuple[float, float]] = []
        self._lock = threading.Lock()

    def add_city(self, name, lat, lon, payload):
        self.geo[name] = [{"name": name, "lat": lat, "lon": lon, "country": "XX"}]
        self.weather[(lat, lon)] = payload

    def geocode(self, city, limit=1):
        with self._lock:
            self.geo_calls.append(city)
        if city in self.failing:
            raise TransportError("HTTP 503 Service Unavailable", status=503)
        return copy.deepcopy(self.geo.get(city, []))

    def current_weather(self, lat, lon):
        with self._lock:
            self.weather_calls.append((lat, lon))
        return copy.deepcopy(self.weather[(lat, lon)])


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


LONDON_WEATHER = {
    "weather": [{"main": "Clear", "description": "clear sky"}],
    "main": {"temp": 15.0, "feels_like": 14.2},
    "visibility": 10000,
}


@pytest.fixture
def fake_client():
    client = FakeClient()
    client.add_city("London", 51.5, -0.12, LONDON_WEATHER)
    client.add_city("Paris", 48.85, 2.35, {
        "weather": [{"main": "Rain", "description": "light rain"}],
        "main": {"temp": 11.0, "feels_like": 10.1},
        "name": "Paris",
    })
    return client


@pytest.fixture
def clock():
    return FakeClock()
