"""Shared fixtures for the flight lookup test suite.

Provides raw Aviationstack / OpenWeatherMap payloads, parsed model
instances, fake upstream clients and a FastAPI test client.
"""

import copy
import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to path so `import backend.app...` works without installing.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from backend.app import main
from backend.app.errors import UpstreamError
from backend.app.models import Aircraft, Flight, FlightLeg, FlightStatus, WeatherSnapshot


# ============================================================
# RAW UPSTREAM PAYLOADS
# ============================================================

_AVIATIONSTACK_RECORD = {
    "flight_date": "2024-01-15",
    "flight_status": "active",
    "departure": {
        "airport": "John F Kennedy International",
        "timezone": "America/New_York",
        "iata": "JFK",
        "terminal": "8",
        "gate": "B22",
        "delay": None,
        "scheduled": "2024-01-15T08:00:00+00:00",
        "estimated": "2024-01-15T08:00:00+00:00",
    },
    "arrival": {
        "airport": "Los Angeles International",
        "timezone": "America/Los_Angeles",
        "iata": "LAX",
        "terminal": "4",
        "gate": "45A",
        "baggage": "3",
        "delay": None,
        "scheduled": "2024-01-15T11:30:00+00:00",
        "estimated": "2024-01-15T11:30:00+00:00",
    },
    "airline": {"name": "American Airlines", "iata": "AA"},
    "flight": {"number": "100", "iata": "AA100"},
    "aircraft": {"iata": "A321"},
}


@pytest.fixture
def aviationstack_record():
    """Factory: aviationstack_record(**overrides) -> one raw flight record.

    ``departure`` / ``arrival`` overrides are merged into the nested dicts.
    """
    def _factory(**overrides):
        record = copy.deepcopy(_AVIATIONSTACK_RECORD)
        for key, value in overrides.items():
            if key in ("departure", "arrival") and isinstance(value, dict):
                record[key].update(value)
            else:
                record[key] = value
        return record
    return _factory


@pytest.fixture
def openweather_payload():
    return {
        "coord": {"lon": -73.7781, "lat": 40.6413},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": 41.54, "feels_like": 36.5, "pressure": 1021, "humidity": 65},
        "wind": {"speed": 9.22, "deg": 300},
        "name": "Jamaica",
    }


def fake_response(status_code=200, payload=None, text=""):
    """Build a fake requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload
    resp.text = text
    return resp


# ============================================================
# MODEL FIXTURES
# ============================================================

@pytest.fixture
def sample_flight():
    return Flight(
        flight_number="AA100",
        airline="American Airlines",
        origin=FlightLeg(
            code="JFK", city="John F Kennedy International", time="2024-01-15T08:00:00+00:00",
            timezone="America/New_York", terminal="8", gate="B22",
        ),
        destination=FlightLeg(
            code="LAX", city="Los Angeles International", time="2024-01-15T11:30:00+00:00",
            timezone="America/Los_Angeles", terminal="4", gate="45A", baggage="3",
        ),
        status=FlightStatus.ON_TIME,
        aircraft=Aircraft(type="A321"),
    )


@pytest.fixture
def bare_flight():
    """A flight with none of the optional leg fields set."""
    return Flight(
        flight_number="BA117",
        airline="British Airways",
        origin=FlightLeg(code="LHR", city="Heathrow", time="2024-03-01T10:00:00+00:00", timezone="Europe/London"),
        destination=FlightLeg(code="JFK", city="John F Kennedy International",
                              time="2024-03-01T18:00:00+00:00", timezone="America/New_York"),
        status=FlightStatus.ON_TIME,
    )


@pytest.fixture
def sample_weather():
    return WeatherSnapshot(
        temp=42, feels_like=37, condition="Clear", description="clear sky",
        icon="01d", humidity=65, wind_speed=9, pressure=1021,
    )


# ============================================================
# FAKE UPSTREAM CLIENTS
# ============================================================

class FakeFlightClient:
    def __init__(self, flights=None, error=None):
        self.flights = flights or []
        self.error = error
        self.calls = []

    def search(self, flight_number):
        self.calls.append(flight_number)
        if self.error:
            raise self.error
        return list(self.flights)


class FakeWeatherClient:
    """Returns ``snapshot`` for every coordinate except those listed in ``failures``."""

    def __init__(self, snapshot=None, error=None, failures=None):
        self.snapshot = snapshot
        self.error = error
        self.failures = failures or {}
        self.calls = []

    def current(self, lat, lon):
        self.calls.append((lat, lon))
        if (lat, lon) in self.failures:
            raise self.failures[(lat, lon)]
        if self.error:
            raise self.error
        if self.snapshot is None:
            raise UpstreamError("no snapshot configured")
        return self.snapshot


@pytest.fixture
def fake_flight_client(monkeypatch):
    """Factory: install a FakeFlightClient as the app's flight client."""
    def _install(flights=None, error=None):
        client = FakeFlightClient(flights=flights, error=error)
        monkeypatch.setattr(main, "_get_flight_client", lambda: client)
        return client
    return _install


@pytest.fixture
def fake_weather_client(monkeypatch):
    """Factory: install a FakeWeatherClient as the app's weather client."""
    def _install(snapshot=None, error=None, failures=None):
        client = FakeWeatherClient(snapshot=snapshot, error=error, failures=failures)
        monkeypatch.setattr(main, "_get_weather_client", lambda: client)
        return client
    return _install


# ============================================================
# FASTAPI TEST CLIENT
# ============================================================

@pytest.fixture
def api_client():
    # Not entered as a context manager, so the startup credential check is skipped.
    return TestClient(main.app)
