from __future__ import annotations

import asyncio
import logging

from backend.app.airports import Coordinate, get_airport_coordinates
from backend.app.errors import UpstreamError
from backend.app.models import Flight, ItineraryCard, WeatherSnapshot
from backend.app.services.calendar import build_google_calendar_link
from backend.app.services.route import AntipodalRouteError, build_route_map
from backend.app.services.weather import WeatherClient


logger = logging.getLogger(__name__)


async def _leg_weather(client: WeatherClient, code: str, coordinate: Coordinate | None) -> WeatherSnapshot | None:
    if coordinate is None:
        return None
    try:
        return await asyncio.to_thread(client.current, coordinate.lat, coordinate.lon)
    except UpstreamError as e:
        # A card without a weather badge is still useful.
        logger.warning("No weather for %s: %s", code, e)
        return None


async def build_itinerary(flight: Flight, weather_client: WeatherClient) -> ItineraryCard:
    origin = get_airport_coordinates(flight.origin.code)
    destination = get_airport_coordinates(flight.destination.code)

    origin_weather, destination_weather = await asyncio.gather(
        _leg_weather(weather_client, flight.origin.code, origin),
        _leg_weather(weather_client, flight.destination.code, destination),
    )

    route = None
    if origin is not None and destination is not None:
        try:
            route = build_route_map(origin, destination)
        except AntipodalRouteError:
            logger.warning("Skipping map for antipodal route %s -> %s", flight.origin.code, flight.destination.code)
    else:
        logger.debug("Map unavailable for %s -> %s", flight.origin.code, flight.destination.code)

    return ItineraryCard(
        flight=flight,
        origin_weather=origin_weather,
        destination_weather=destination_weather,
        route=route,
        calendar_link=build_google_calendar_link(flight),
    )


async def build_itineraries(flights: list[Flight], weather_client: WeatherClient) -> list[ItineraryCard]:
    return list(await asyncio.gather(*(build_itinerary(f, weather_client) for f in flights)))
