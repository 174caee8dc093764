"""Great-circle distance on a spherical Earth (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final

from radius_map.models import GeoPoint

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius in meters


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    No range validation is done: out-of-range degrees give a defined (if
    meaningless) distance; NaN or inf inputs give NaN.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    # math.sin/cos raise on inf instead of returning NaN
    if not all(math.isfinite(v) for v in (lat1, lon1, lat2, lon2)):
        return math.nan

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    if a > 1.0:
        # rounding near antipodes
        a = 1.0
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance in meters between two GeoPoints."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def within_radius(distance: float, radius_m: float) -> bool:
    """Membership rule: inside or on the boundary. A NaN distance is never inside."""

    return distance <= radius_m


def is_inside_circle(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    radius_m: float,
) -> bool:
    """Check whether a point is inside or on the boundary of a circle."""

    return within_radius(haversine_m(lat, lon, center_lat, center_lon), radius_m)


def circle_polygon(lat: float, lon: float, radius_m: float, num_points: int = 72) -> list[list[float]]:
    """Build a closed ring of [lon, lat] vertices approximating a circle.

    Each vertex is the destination point at ``radius_m`` along an evenly spaced
    bearing, so the ring stays round at any latitude. The first vertex is
    repeated at the end (pydeck PolygonLayer friendly).
    """

    if num_points < 3:
        raise ValueError(f"num_points 至少为 3，实际：{num_points}")

    phi1 = math.radians(lat)
    lambda1 = math.radians(lon)
    delta = radius_m / EARTH_RADIUS_M

    ring: list[list[float]] = []
    for i in range(num_points):
        theta = 2.0 * math.pi * i / num_points
        phi2 = math.asin(
            math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta)
        )
        lambda2 = lambda1 + math.atan2(
            math.sin(theta) * math.sin(delta) * math.cos(phi1),
            math.cos(delta) - math.sin(phi1) * math.sin(phi2),
        )
        # normalize to [-180, 180)
        lon2 = (math.degrees(lambda2) + 540.0) % 360.0 - 180.0
        ring.append([lon2, math.degrees(phi2)])
    ring.append(list(ring[0]))
    return ring
