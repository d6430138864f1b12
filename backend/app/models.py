from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


LatLng = tuple[float, float]
Bounds = tuple[LatLng, LatLng]


class _Model(BaseModel):
    # Python side uses snake_case, JSON uses the camelCase keys the front end reads.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_public_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FlightStatus(str, Enum):
    ON_TIME = "On Time"
    DELAYED = "Delayed"
    CANCELLED = "Cancelled"


class FlightLeg(_Model):
    code: str
    city: str
    time: str
    timezone: str
    terminal: Optional[str] = None
    gate: Optional[str] = None
    baggage: Optional[str] = None
    estimated_time: Optional[str] = None
    delay_minutes: Optional[int] = None


class Aircraft(_Model):
    type: str


class Flight(_Model):
    flight_number: str
    airline: str
    origin: FlightLeg
    destination: FlightLeg
    status: FlightStatus
    aircraft: Optional[Aircraft] = None


class WeatherSnapshot(_Model):
    temp: int
    feels_like: int
    condition: str
    description: str
    icon: str
    humidity: int | float
    wind_speed: int
    pressure: int | float


class RouteMap(_Model):
    origin: LatLng
    destination: LatLng
    path: list[LatLng]
    bounds: Bounds
    path_bounds: Bounds
    distance_km: float


class ItineraryCard(_Model):
    flight: Flight
    origin_weather: Optional[WeatherSnapshot] = None
    destination_weather: Optional[WeatherSnapshot] = None
    route: Optional[RouteMap] = None
    calendar_link: str
