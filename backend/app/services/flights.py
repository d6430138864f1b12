from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import ValidationError
import requests

from backend.app.cache import TTLCache
from backend.app.errors import UpstreamError
from backend.app.models import Aircraft, Flight, FlightLeg, FlightStatus


logger = logging.getLogger(__name__)

DELAY_THRESHOLD_MINUTES = 15
_DISRUPTED_STATUSES = {"incident", "diverted"}

# Aviationstack's edge rejects some default client user agents.
_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class FlightStatusClient:
    """Looks flights up by IATA flight number on the Aviationstack API."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.aviationstack.com/v1/flights",
        cache: TTLCache[Any] | None = None,
        cache_ttl_seconds: int = 60,
        timeout: float = 15,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.timeout = timeout

    def search(self, flight_number: str | None) -> list[Flight]:
        number = (flight_number or "").strip().upper()
        if not number:
            return []
        if self.cache is None:
            return self._fetch(number)
        return self.cache.get_or_set(("flights", number), lambda: self._fetch(number), ttl_seconds=self.cache_ttl_seconds)

    def _fetch(self, flight_number: str) -> list[Flight]:
        params = {"access_key": self.api_key, "flight_iata": flight_number}
        try:
            resp = requests.get(self.base_url, params=params, headers={"User-Agent": _USER_AGENT}, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Aviationstack request failed: {e}") from e

        if not resp.ok:
            logger.error("Aviationstack responded %s: %s", resp.status_code, resp.text[:500])
            raise UpstreamError(f"Aviationstack responded with status {resp.status_code}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError("Aviationstack returned invalid JSON") from e

        records = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(records, list):
            return []

        flights = [parse_flight(r) for r in records]
        logger.info("Aviationstack returned %d flight(s) for %s", len(flights), flight_number)
        return flights


def derive_status(record: dict[str, Any]) -> FlightStatus:
    provider_status = str(record.get("flight_status") or "").lower()
    if provider_status == "cancelled":
        return FlightStatus.CANCELLED

    departure_delay = _delay_value(record.get("departure"))
    arrival_delay = _delay_value(record.get("arrival"))
    if (
        departure_delay > DELAY_THRESHOLD_MINUTES
        or arrival_delay > DELAY_THRESHOLD_MINUTES
        or provider_status in _DISRUPTED_STATUSES
    ):
        return FlightStatus.DELAYED
    return FlightStatus.ON_TIME


def parse_flight(record: Any) -> Flight:
    if not isinstance(record, dict):
        raise UpstreamError(f"malformed flight record: expected object, got {type(record).__name__}")

    departure = record.get("departure")
    arrival = record.get("arrival")
    flight = record.get("flight")
    airline = record.get("airline")
    for name, section in (("departure", departure), ("arrival", arrival), ("flight", flight), ("airline", airline)):
        if not isinstance(section, dict):
            raise UpstreamError(f"malformed flight record: missing '{name}'")

    aircraft = record.get("aircraft") or {}
    aircraft_type = aircraft.get("iata") if isinstance(aircraft, dict) else None

    try:
        return Flight(
            flight_number=str(flight.get("iata") or ""),
            airline=str(airline.get("name") or ""),
            origin=_parse_leg(departure, with_baggage=False),
            destination=_parse_leg(arrival, with_baggage=True),
            status=derive_status(record),
            aircraft=Aircraft(type=str(aircraft_type)) if aircraft_type else None,
        )
    except ValidationError as e:
        raise UpstreamError(f"malformed flight record: {e.error_count()} invalid field(s)") from e


def _parse_leg(raw: dict[str, Any], *, with_baggage: bool) -> FlightLeg:
    return FlightLeg(
        code=str(raw.get("iata") or ""),
        city=str(raw.get("airport") or ""),
        time=str(raw.get("scheduled") or ""),
        timezone=str(raw.get("timezone") or ""),
        terminal=_optional_str(raw.get("terminal")),
        gate=_optional_str(raw.get("gate")),
        baggage=_optional_str(raw.get("baggage")) if with_baggage else None,
        estimated_time=_optional_str(raw.get("estimated")),
        delay_minutes=_delay_minutes(raw) or None,
    )


def _delay_value(leg: Any) -> float:
    if not isinstance(leg, dict):
        return 0.0
    value = leg.get("delay")
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        delay = float(value)
    except (TypeError, ValueError):
        return 0.0
    return delay if math.isfinite(delay) else 0.0


def _delay_minutes(leg: Any) -> int:
    # Whole minutes for display only; the status rule compares the raw value.
    return int(_delay_value(leg))


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
