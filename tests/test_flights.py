"""Tests for the Aviationstack adapter (with mocked HTTP requests)."""

from unittest.mock import patch

import pytest
import requests

from backend.app.cache import TTLCache
from backend.app.errors import UpstreamError
from backend.app.models import FlightStatus
from backend.app.services import flights

from conftest import fake_response


def _make_client(**kwargs):
    return flights.FlightStatusClient(api_key="test-key", base_url="https://flights.example/v1/flights", **kwargs)


# ── derive_status ───────────────────────────────────────────

class TestDeriveStatus:
    def test_departure_delay_over_threshold_is_delayed(self, aviationstack_record):
        record = aviationstack_record(flight_status="active", departure={"delay": 20})
        assert flights.derive_status(record) == FlightStatus.DELAYED

    def test_departure_delay_under_threshold_is_on_time(self, aviationstack_record):
        record = aviationstack_record(flight_status="active", departure={"delay": 10})
        assert flights.derive_status(record) == FlightStatus.ON_TIME

    def test_exactly_threshold_is_on_time(self, aviationstack_record):
        record = aviationstack_record(departure={"delay": 15}, arrival={"delay": 15})
        assert flights.derive_status(record) == FlightStatus.ON_TIME

    def test_arrival_delay_over_threshold_is_delayed(self, aviationstack_record):
        record = aviationstack_record(arrival={"delay": 16})
        assert flights.derive_status(record) == FlightStatus.DELAYED

    def test_cancelled_wins_over_delay(self, aviationstack_record):
        record = aviationstack_record(flight_status="cancelled", departure={"delay": 90})
        assert flights.derive_status(record) == FlightStatus.CANCELLED

    def test_cancelled_without_delay(self, aviationstack_record):
        assert flights.derive_status(aviationstack_record(flight_status="cancelled")) == FlightStatus.CANCELLED

    def test_incident_is_delayed(self, aviationstack_record):
        assert flights.derive_status(aviationstack_record(flight_status="incident")) == FlightStatus.DELAYED

    def test_diverted_is_delayed(self, aviationstack_record):
        assert flights.derive_status(aviationstack_record(flight_status="diverted")) == FlightStatus.DELAYED

    def test_scheduled_no_delay_is_on_time(self, aviationstack_record):
        assert flights.derive_status(aviationstack_record(flight_status="scheduled")) == FlightStatus.ON_TIME

    def test_null_delays_count_as_zero(self, aviationstack_record):
        record = aviationstack_record(departure={"delay": None}, arrival={"delay": None})
        assert flights.derive_status(record) == FlightStatus.ON_TIME

    def test_fractional_delay_over_threshold_is_delayed(self, aviationstack_record):
        record = aviationstack_record(flight_status="active", departure={"delay": 15.7})
        assert flights.derive_status(record) == FlightStatus.DELAYED

    def test_numeric_string_delay_is_compared_as_number(self, aviationstack_record):
        record = aviationstack_record(flight_status="active", arrival={"delay": "20.0"})
        assert flights.derive_status(record) == FlightStatus.DELAYED

    def test_unparsable_delay_counts_as_zero(self, aviationstack_record):
        record = aviationstack_record(flight_status="active", departure={"delay": "soon"})
        assert flights.derive_status(record) == FlightStatus.ON_TIME


# ── parse_flight ────────────────────────────────────────────

class TestParseFlight:
    def test_maps_core_fields(self, aviationstack_record):
        f = flights.parse_flight(aviationstack_record())
        assert f.flight_number == "AA100"
        assert f.airline == "American Airlines"
        assert f.status == FlightStatus.ON_TIME
        assert f.aircraft.type == "A321"

    def test_maps_origin_leg(self, aviationstack_record):
        origin = flights.parse_flight(aviationstack_record()).origin
        assert origin.code == "JFK"
        assert origin.city == "John F Kennedy International"
        assert origin.time == "2024-01-15T08:00:00+00:00"
        assert origin.timezone == "America/New_York"
        assert origin.terminal == "8"
        assert origin.gate == "B22"
        assert origin.baggage is None

    def test_maps_destination_baggage(self, aviationstack_record):
        assert flights.parse_flight(aviationstack_record()).destination.baggage == "3"

    def test_departure_baggage_ignored(self, aviationstack_record):
        record = aviationstack_record(departure={"baggage": "7"})
        assert flights.parse_flight(record).origin.baggage is None

    def test_delay_minutes(self, aviationstack_record):
        f = flights.parse_flight(aviationstack_record(departure={"delay": 25}))
        assert f.origin.delay_minutes == 25
        assert f.destination.delay_minutes is None

    def test_fractional_delay_shown_in_whole_minutes(self, aviationstack_record):
        f = flights.parse_flight(aviationstack_record(departure={"delay": "15.7"}))
        assert f.origin.delay_minutes == 15
        assert f.status == FlightStatus.DELAYED

    def test_falsy_optionals_dropped(self, aviationstack_record):
        record = aviationstack_record(
            departure={"terminal": "", "gate": None, "delay": 0, "estimated": None},
        )
        origin = flights.parse_flight(record).origin
        assert origin.terminal is None
        assert origin.gate is None
        assert origin.delay_minutes is None
        assert origin.estimated_time is None

    def test_missing_aircraft(self, aviationstack_record):
        assert flights.parse_flight(aviationstack_record(aircraft=None)).aircraft is None

    def test_aircraft_without_iata(self, aviationstack_record):
        assert flights.parse_flight(aviationstack_record(aircraft={"icao": "A321"})).aircraft is None

    def test_missing_departure_is_malformed(self, aviationstack_record):
        with pytest.raises(UpstreamError):
            flights.parse_flight(aviationstack_record(departure=None))

    def test_missing_airline_is_malformed(self, aviationstack_record):
        with pytest.raises(UpstreamError):
            flights.parse_flight(aviationstack_record(airline=None))

    def test_non_dict_record_is_malformed(self):
        with pytest.raises(UpstreamError):
            flights.parse_flight("AA100")

    def test_public_dict(self, aviationstack_record):
        data = flights.parse_flight(aviationstack_record(departure={"delay": 20})).to_public_dict()
        assert data["flightNumber"] == "AA100"
        assert data["status"] == "Delayed"
        assert data["origin"]["delayMinutes"] == 20
        assert data["origin"]["estimatedTime"] == "2024-01-15T08:00:00+00:00"
        assert "delayMinutes" not in data["destination"]
        assert data["aircraft"] == {"type": "A321"}


# ── FlightStatusClient ──────────────────────────────────────

class TestFlightStatusClient:
    @patch("requests.get")
    def test_blank_number_skips_upstream(self, mock_get):
        assert _make_client().search("   ") == []
        assert _make_client().search(None) == []
        mock_get.assert_not_called()

    @patch("requests.get")
    def test_sends_key_and_flight_number(self, mock_get, aviationstack_record):
        mock_get.return_value = fake_response(payload={"data": [aviationstack_record()]})
        _make_client(timeout=7).search(" aa100 ")
        args, kwargs = mock_get.call_args
        assert args[0] == "https://flights.example/v1/flights"
        assert kwargs["params"] == {"access_key": "test-key", "flight_iata": "AA100"}
        assert kwargs["timeout"] == 7
        assert "User-Agent" in kwargs["headers"]

    @patch("requests.get")
    def test_returns_parsed_flights(self, mock_get, aviationstack_record):
        mock_get.return_value = fake_response(payload={"data": [
            aviationstack_record(),
            aviationstack_record(flight_status="cancelled"),
        ]})
        found = _make_client().search("AA100")
        assert [f.status for f in found] == [FlightStatus.ON_TIME, FlightStatus.CANCELLED]

    @patch("requests.get")
    def test_empty_data(self, mock_get):
        mock_get.return_value = fake_response(payload={"data": []})
        assert _make_client().search("ZZ999") == []

    @patch("requests.get")
    def test_missing_data_key(self, mock_get):
        mock_get.return_value = fake_response(payload={"error": {"code": "usage_limit_reached"}})
        assert _make_client().search("AA100") == []

    @patch("requests.get")
    def test_non_list_data(self, mock_get):
        mock_get.return_value = fake_response(payload={"data": {"unexpected": True}})
        assert _make_client().search("AA100") == []

    @patch("requests.get")
    def test_http_error_raises_upstream_error(self, mock_get):
        mock_get.return_value = fake_response(status_code=503, text="maintenance")
        with pytest.raises(UpstreamError) as exc:
            _make_client().search("AA100")
        assert exc.value.status_code == 503

    @patch("requests.get")
    def test_transport_error_raises_upstream_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("boom")
        with pytest.raises(UpstreamError):
            _make_client().search("AA100")

    @patch("requests.get")
    def test_invalid_json_raises_upstream_error(self, mock_get):
        resp = fake_response()
        resp.json.side_effect = ValueError("not json")
        mock_get.return_value = resp
        with pytest.raises(UpstreamError):
            _make_client().search("AA100")

    @patch("requests.get")
    def test_malformed_record_raises_upstream_error(self, mock_get, aviationstack_record):
        mock_get.return_value = fake_response(payload={"data": [aviationstack_record(flight=None)]})
        with pytest.raises(UpstreamError):
            _make_client().search("AA100")

    @patch("requests.get")
    def test_results_cached_per_flight_number(self, mock_get, aviationstack_record):
        mock_get.return_value = fake_response(payload={"data": [aviationstack_record()]})
        client = _make_client(cache=TTLCache(default_ttl_seconds=60))
        client.search("AA100")
        client.search("aa100")
        assert mock_get.call_count == 1

    @patch("requests.get")
    def test_zero_ttl_disables_cache(self, mock_get, aviationstack_record):
        mock_get.return_value = fake_response(payload={"data": [aviationstack_record()]})
        client = _make_client(cache=TTLCache(), cache_ttl_seconds=0)
        client.search("AA100")
        client.search("AA100")
        assert mock_get.call_count == 2

    @patch("requests.get")
    def test_failures_not_cached(self, mock_get, aviationstack_record):
        mock_get.side_effect = [
            fake_response(status_code=500),
            fake_response(payload={"data": [aviationstack_record()]}),
        ]
        client = _make_client(cache=TTLCache(default_ttl_seconds=60))
        with pytest.raises(UpstreamError):
            client.search("AA100")
        assert len(client.search("AA100")) == 1
