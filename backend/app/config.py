from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from backend.app.errors import ConfigError


load_dotenv()


@dataclass(frozen=True)
class Settings:
    aviationstack_api_key: str | None = os.getenv("AVIATIONSTACK_API_KEY")
    aviationstack_url: str = os.getenv("AVIATIONSTACK_URL", "https://api.aviationstack.com/v1/flights")

    openweather_api_key: str | None = os.getenv("OPENWEATHER_API_KEY")
    openweather_url: str = os.getenv("OPENWEATHER_URL", "https://api.openweathermap.org/data/2.5/weather")

    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
    flight_cache_ttl_seconds: int = int(os.getenv("FLIGHT_CACHE_TTL_SECONDS", "60"))
    weather_cache_ttl_seconds: int = int(os.getenv("WEATHER_CACHE_TTL_SECONDS", "1800"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def missing_credentials(self) -> list[str]:
        missing = []
        if not (self.aviationstack_api_key or "").strip():
            missing.append("AVIATIONSTACK_API_KEY")
        if not (self.openweather_api_key or "").strip():
            missing.append("OPENWEATHER_API_KEY")
        return missing

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")


settings = Settings()
