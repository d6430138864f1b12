from __future__ import annotations


class FlightLookupError(Exception):
    """Base class for errors raised by the flight lookup service."""


class ConfigError(FlightLookupError):
    pass


class UpstreamError(FlightLookupError):
    """An upstream provider could not be reached or returned something unusable.

    The message is meant for server-side logs; HTTP handlers answer with a
    generic message instead.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WeatherAuthError(UpstreamError):
    """The weather provider rejected the API key (new keys take a while to activate)."""
