from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlencode

from backend.app.models import Flight, FlightLeg


GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
_DISPLAY_FORMAT = "%b %d, %Y %I:%M %p"


def build_google_calendar_link(flight: Flight) -> str:
    """Google Calendar "add event" URL spanning scheduled departure to scheduled arrival.

    When either scheduled time is unparsable the ``dates`` parameter is left
    out and Calendar lets the user pick the slot.
    """
    params = {
        "action": "TEMPLATE",
        "text": f"✈️ {flight.flight_number} - {flight.airline}",
    }
    try:
        start = format_calendar_timestamp(flight.origin.time)
        end = format_calendar_timestamp(flight.destination.time)
    except (ValueError, OverflowError):
        pass
    else:
        params["dates"] = f"{start}/{end}"
    params.update({
        "details": build_event_description(flight),
        "location": (
            f"{flight.origin.code} ({flight.origin.city}) → "
            f"{flight.destination.code} ({flight.destination.city})"
        ),
        "trp": "false",
    })
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def build_event_description(flight: Flight) -> str:
    lines = [
        f"Flight: {flight.flight_number}",
        f"Airline: {flight.airline}",
        f"Status: {flight.status.value}",
        "",
        "📍 DEPARTURE",
    ]
    lines.extend(_leg_lines(flight.origin))
    lines.extend(["", "🎯 ARRIVAL"])
    lines.extend(_leg_lines(flight.destination))
    if flight.aircraft:
        lines.extend(["", f"Aircraft: {flight.aircraft.type}"])
    return "\n".join(lines)


def _leg_lines(leg: FlightLeg) -> list[str]:
    lines = [
        f"Airport: {leg.city} ({leg.code})",
        f"Time: {format_display_time(leg.time)}",
        f"Timezone: {leg.timezone}",
    ]
    if leg.terminal:
        lines.append(f"Terminal: {leg.terminal}")
    if leg.gate:
        lines.append(f"Gate: {leg.gate}")
    if leg.baggage:
        lines.append(f"Baggage: {leg.baggage}")
    if leg.estimated_time and leg.estimated_time != leg.time:
        lines.append(f"Estimated: {format_display_time(leg.estimated_time)}")
    if leg.delay_minutes and leg.delay_minutes > 0:
        lines.append(f"⚠️ Delay: {leg.delay_minutes} minutes")
    return lines


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_calendar_timestamp(value: str) -> str:
    """``2024-01-15T08:30:00-05:00`` -> ``20240115T133000Z``."""
    return parse_timestamp(value).astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def format_display_time(value: str) -> str:
    try:
        return parse_timestamp(value).strftime(_DISPLAY_FORMAT)
    except (ValueError, OverflowError):
        return value
