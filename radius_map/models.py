"""Data models for the reference point and candidate points."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

DEFAULT_LATITUDE: Final[float] = 0.0
DEFAULT_LONGITUDE: Final[float] = 0.0
DEFAULT_RADIUS_M: Final[float] = 1000.0

# Map viewport: world view on start, closer once a reference point is set.
DEFAULT_ZOOM: Final[int] = 2
FOCUS_ZOOM: Final[int] = 10


class CoordinateRangeError(ValueError):
    """Raised when a coordinate or radius is outside its valid range."""


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A location on the sphere.

    Attributes:
        latitude: Latitude in decimal degrees, expected in [-90, 90].
        longitude: Longitude in decimal degrees, expected in [-180, 180].
    """

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ReferencePoint:
    """The single point all candidates are measured from.

    Attributes:
        point: Center location.
        radius_m: Membership radius in meters.
    """

    point: GeoPoint
    radius_m: float

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


@dataclass(frozen=True, slots=True)
class CandidatePoint:
    """A user-added point classified against the reference.

    Note:
        ``distance_m`` and ``is_inside`` always belong to one reference point.
        When the reference changes the registry builds new records rather than
        patching these.
    """

    point: GeoPoint
    distance_m: float
    is_inside: bool

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


@dataclass(frozen=True, slots=True)
class RegistrySummary:
    """Counts of classified candidates."""

    total: int
    inside: int

    @property
    def outside(self) -> int:
        return self.total - self.inside


def validate_geo_point(point: GeoPoint) -> GeoPoint:
    """Return ``point`` unchanged, or raise if it is out of range.

    Raises:
        CoordinateRangeError: If latitude/longitude is NaN or out of range.
    """

    if not -90.0 <= point.latitude <= 90.0:
        raise CoordinateRangeError(f"纬度超出范围 [-90, 90]：{point.latitude!r}")
    if not -180.0 <= point.longitude <= 180.0:
        raise CoordinateRangeError(f"经度超出范围 [-180, 180]：{point.longitude!r}")
    return point


def validate_radius(radius_m: float) -> float:
    """Return ``radius_m`` unchanged, or raise if it is negative or not finite.

    Raises:
        CoordinateRangeError: If radius is NaN, infinite or negative.
    """

    if not math.isfinite(radius_m) or radius_m < 0:
        raise CoordinateRangeError(f"半径必须是非负有限数（米）：{radius_m!r}")
    return radius_m
