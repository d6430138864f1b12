"""Great-circle geometry for drawing a flight on the map.

Points are spherically interpolated (slerp) between the two airports, which
gives an evenly spaced polyline along the shortest surface path.
"""
from __future__ import annotations

import math
from typing import Iterable

from backend.app.airports import Coordinate
from backend.app.models import Bounds, LatLng, RouteMap


EARTH_RADIUS_KM = 6371.0
DEFAULT_PATH_POINTS = 100

# Angular tolerances in radians. Near pi the haversine form loses precision
# (one ulp in `a` moves delta by ~1e-8), so the antipodal check is looser.
_COINCIDENT_TOLERANCE = 1e-9
_ANTIPODAL_TOLERANCE = 1e-6


class AntipodalRouteError(ValueError):
    """Raised for antipodal endpoints: every great circle through them is equally short."""


def central_angle(origin: Coordinate, destination: Coordinate) -> float:
    phi1, phi2 = math.radians(origin.lat), math.radians(destination.lat)
    dphi = phi2 - phi1
    dlambda = math.radians(destination.lon - origin.lon)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def great_circle_distance_km(origin: Coordinate, destination: Coordinate) -> float:
    return EARTH_RADIUS_KM * central_angle(origin, destination)


def calculate_flight_path(origin: Coordinate, destination: Coordinate, num_points: int = DEFAULT_PATH_POINTS) -> list[Coordinate]:
    """Return ``num_points + 1`` coordinates from origin to destination, both included.

    Coincident endpoints give repeated copies of the origin. Antipodal
    endpoints raise :class:`AntipodalRouteError`.
    """
    if isinstance(num_points, bool) or not isinstance(num_points, int) or num_points < 1:
        raise ValueError(f"num_points must be a positive integer, got {num_points!r}")

    delta = central_angle(origin, destination)
    if delta <= _COINCIDENT_TOLERANCE:
        return [origin] * (num_points + 1)
    if math.pi - delta <= _ANTIPODAL_TOLERANCE:
        raise AntipodalRouteError(f"no unique great circle between {origin.as_pair()} and {destination.as_pair()}")

    phi1, lambda1 = math.radians(origin.lat), math.radians(origin.lon)
    phi2, lambda2 = math.radians(destination.lat), math.radians(destination.lon)
    x1, y1, z1 = math.cos(phi1) * math.cos(lambda1), math.cos(phi1) * math.sin(lambda1), math.sin(phi1)
    x2, y2, z2 = math.cos(phi2) * math.cos(lambda2), math.cos(phi2) * math.sin(lambda2), math.sin(phi2)
    sin_delta = math.sin(delta)

    points: list[Coordinate] = [origin]
    for i in range(1, num_points):
        f = i / num_points
        a = math.sin((1 - f) * delta) / sin_delta
        b = math.sin(f * delta) / sin_delta
        x = a * x1 + b * x2
        y = a * y1 + b * y2
        z = a * z1 + b * z2
        lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
        lon = math.degrees(math.atan2(y, x))
        points.append(Coordinate(_clamp(lat, 90.0), _clamp(lon, 180.0)))
    points.append(destination)
    return points


def calculate_map_bounds(origin: Coordinate, destination: Coordinate) -> Bounds:
    """Bounding box of the two endpoints as ((min_lat, min_lon), (max_lat, max_lon)).

    Long east-west great circles bulge poleward of this box; use
    :func:`calculate_path_bounds` when the whole curve has to fit.
    """
    return (
        (min(origin.lat, destination.lat), min(origin.lon, destination.lon)),
        (max(origin.lat, destination.lat), max(origin.lon, destination.lon)),
    )


def calculate_path_bounds(points: Iterable[Coordinate] | Iterable[LatLng]) -> Bounds:
    pts = [tuple(p) for p in points]
    if not pts:
        raise ValueError("cannot bound an empty path")
    lats = [lat for lat, _ in pts]
    lons = [lon for _, lon in pts]
    return ((min(lats), min(lons)), (max(lats), max(lons)))


def unwrap_longitudes(points: Iterable[Coordinate]) -> list[LatLng]:
    """Shift longitudes by whole turns so no step between neighbours exceeds 180 degrees.

    Leaflet draws straight segments between consecutive points, so a path that
    crosses the antimeridian has to leave [-180, 180] to stay continuous.
    """
    unwrapped: list[LatLng] = []
    for p in points:
        lon = p.lon
        if unwrapped:
            prev = unwrapped[-1][1]
            while lon - prev > 180.0:
                lon -= 360.0
            while lon - prev < -180.0:
                lon += 360.0
        unwrapped.append((p.lat, lon))
    return unwrapped


def _clamp(value: float, limit: float) -> float:
    # atan2 can overshoot the range by an ulp
    return max(-limit, min(limit, value))


def build_route_map(origin: Coordinate, destination: Coordinate, num_points: int = DEFAULT_PATH_POINTS) -> RouteMap:
    path = unwrap_longitudes(calculate_flight_path(origin, destination, num_points))
    return RouteMap(
        origin=origin.as_pair(),
        destination=destination.as_pair(),
        path=path,
        bounds=calculate_map_bounds(origin, destination),
        path_bounds=calculate_path_bounds(path),
        distance_km=round(great_circle_distance_km(origin, destination), 1),
    )
