from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.airports import Coordinate, get_airport
from backend.app.cache import TTLCache
from backend.app.config import settings
from backend.app.errors import UpstreamError, WeatherAuthError
from backend.app.logging_config import setup_logging
from backend.app.services.flights import FlightStatusClient
from backend.app.services.itinerary import build_itineraries
from backend.app.services.route import DEFAULT_PATH_POINTS, AntipodalRouteError, build_route_map
from backend.app.services.weather import WeatherClient


logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).resolve().parent
STATIC_DIR = APP_DIR / "static"

FLIGHTS_ERROR = "Failed to fetch flight data"
WEATHER_ERROR = "Failed to fetch weather data"
MAX_PATH_POINTS = 2000


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    # Refuse to serve without real provider keys.
    settings.require_credentials()
    logger.info("Flight lookup service ready")
    yield


app = FastAPI(title="Flight Lookup", version="0.1.0", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


flight_cache: TTLCache[Any] = TTLCache(default_ttl_seconds=settings.flight_cache_ttl_seconds)
weather_cache: TTLCache[Any] = TTLCache(default_ttl_seconds=settings.weather_cache_ttl_seconds)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request parameters"}, status_code=400)


def _get_flight_client() -> FlightStatusClient:
    return FlightStatusClient(
        api_key=settings.aviationstack_api_key or "",
        base_url=settings.aviationstack_url,
        cache=flight_cache,
        cache_ttl_seconds=settings.flight_cache_ttl_seconds,
        timeout=settings.http_timeout_seconds,
    )


def _get_weather_client() -> WeatherClient:
    return WeatherClient(
        api_key=settings.openweather_api_key or "",
        base_url=settings.openweather_url,
        cache=weather_cache,
        cache_ttl_seconds=settings.weather_cache_ttl_seconds,
        timeout=settings.http_timeout_seconds,
    )


def _parse_coordinate(lat: str | None, lon: str | None) -> Coordinate:
    if not (lat or "").strip() or not (lon or "").strip():
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")
    try:
        return Coordinate(float(lat), float(lon))
    except ValueError:
        raise HTTPException(status_code=400, detail="Latitude and longitude must be valid numbers")


@app.get("/")
def index() -> FileResponse:
    return FileResponse(str(STATIC_DIR / "index.html"))


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/flights")
def flights(flightNumber: str | None = None) -> list[dict[str, Any]]:
    if not (flightNumber or "").strip():
        return []
    try:
        found = _get_flight_client().search(flightNumber)
    except UpstreamError:
        logger.exception("Flight lookup failed for %s", flightNumber)
        raise HTTPException(status_code=500, detail=FLIGHTS_ERROR)
    return [f.to_public_dict() for f in found]


@app.get("/api/weather")
def weather(lat: str | None = None, lon: str | None = None) -> dict[str, Any]:
    point = _parse_coordinate(lat, lon)
    try:
        snapshot = _get_weather_client().current(point.lat, point.lon)
    except WeatherAuthError:
        raise HTTPException(status_code=401, detail="API key pending activation")
    except UpstreamError:
        logger.exception("Weather lookup failed for %s,%s", point.lat, point.lon)
        raise HTTPException(status_code=500, detail=WEATHER_ERROR)
    return snapshot.to_public_dict()


@app.get("/api/airports/{code}")
def airport(code: str) -> dict[str, Any]:
    found = get_airport(code)
    if found is None:
        raise HTTPException(status_code=404, detail="Unknown airport code")
    return {"code": found.iata, "city": found.city, "lat": found.coordinate.lat, "lon": found.coordinate.lon}


@app.get("/api/route")
def route(
    origin: str | None = None,
    destination: str | None = None,
    points: int = Query(DEFAULT_PATH_POINTS, ge=1, le=MAX_PATH_POINTS),
) -> dict[str, Any]:
    if not (origin or "").strip() or not (destination or "").strip():
        raise HTTPException(status_code=400, detail="origin and destination are required")

    start, end = get_airport(origin), get_airport(destination)
    if start is None or end is None:
        raise HTTPException(status_code=404, detail="Unknown airport code")
    try:
        route_map = build_route_map(start.coordinate, end.coordinate, points)
    except AntipodalRouteError:
        raise HTTPException(status_code=422, detail="Route is undefined for antipodal airports")
    return route_map.to_public_dict()


@app.get("/api/itinerary")
async def itinerary(flightNumber: str | None = None) -> list[dict[str, Any]]:
    if not (flightNumber or "").strip():
        return []
    try:
        found = await asyncio.to_thread(_get_flight_client().search, flightNumber)
    except UpstreamError:
        logger.exception("Flight lookup failed for %s", flightNumber)
        raise HTTPException(status_code=500, detail=FLIGHTS_ERROR)
    cards = await build_itineraries(found, _get_weather_client())
    return [c.to_public_dict() for c in cards]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
