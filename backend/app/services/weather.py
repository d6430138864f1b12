from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import ValidationError
import requests

from backend.app.cache import TTLCache
from backend.app.errors import UpstreamError, WeatherAuthError
from backend.app.models import WeatherSnapshot


logger = logging.getLogger(__name__)


class WeatherClient:
    """Current conditions from OpenWeatherMap, in imperial units (°F, mph)."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5/weather",
        cache: TTLCache[Any] | None = None,
        cache_ttl_seconds: int = 1800,
        timeout: float = 15,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.timeout = timeout

    def current(self, lat: float, lon: float) -> WeatherSnapshot:
        if self.cache is None:
            return self._fetch(lat, lon)
        key = ("weather", round(lat, 4), round(lon, 4))
        return self.cache.get_or_set(key, lambda: self._fetch(lat, lon), ttl_seconds=self.cache_ttl_seconds)

    def _fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": "imperial"}
        try:
            resp = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"OpenWeatherMap request failed: {e}") from e

        if resp.status_code == 401:
            logger.info("OpenWeatherMap rejected the API key; new keys can take up to 2 hours to activate")
            raise WeatherAuthError("API key pending activation", status_code=401)
        if not resp.ok:
            logger.error("OpenWeatherMap responded %s: %s", resp.status_code, resp.text[:500])
            raise UpstreamError(f"OpenWeatherMap responded with status {resp.status_code}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError("OpenWeatherMap returned invalid JSON") from e
        return parse_weather(payload)


def parse_weather(payload: Any) -> WeatherSnapshot:
    try:
        main = payload["main"]
        conditions = payload["weather"][0]
        wind = payload.get("wind") or {}
        return WeatherSnapshot(
            temp=round_half_up(main["temp"]),
            feels_like=round_half_up(main["feels_like"]),
            condition=str(conditions["main"]),
            description=str(conditions["description"]),
            icon=str(conditions["icon"]),
            humidity=main["humidity"],
            wind_speed=round_half_up(wind.get("speed", 0)),
            pressure=main["pressure"],
        )
    except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
        raise UpstreamError(f"malformed weather payload: {e!r}") from e


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (-2.5 -> -2), unlike round()."""
    return int(math.floor(float(value) + 0.5))
