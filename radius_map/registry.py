"""Point registry: owns the reference point and classifies candidates against it."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from radius_map.geo import distance_m, within_radius
from radius_map.models import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_RADIUS_M,
    CandidatePoint,
    GeoPoint,
    ReferencePoint,
    RegistrySummary,
    validate_geo_point,
    validate_radius,
)

logger = logging.getLogger(__name__)


class PointRegistry:
    """In-memory model behind the map widget.

    ``set_reference_point``, ``add_candidate_point(s)``, ``reclassify_all`` and
    ``clear`` are the only ways to change state. Every one of them ends with a
    full rescan of the candidate list, so ``inside_count`` always equals the
    number of candidates with ``is_inside``.

    Args:
        reference: Initial reference point. Defaults to (0, 0) with 1000 m.
        strict: If True, reject out-of-range coordinates and negative radius
            with ``CoordinateRangeError`` instead of accepting them.
    """

    def __init__(self, reference: ReferencePoint | None = None, *, strict: bool = False) -> None:
        self._strict = strict
        if reference is None:
            reference = ReferencePoint(GeoPoint(DEFAULT_LATITUDE, DEFAULT_LONGITUDE), DEFAULT_RADIUS_M)
        elif strict:
            validate_geo_point(reference.point)
            validate_radius(reference.radius_m)
        self._reference = reference
        self._candidates: list[CandidatePoint] = []
        self._inside_count = 0

    @property
    def reference(self) -> ReferencePoint:
        """Current reference point (for the marker and circle)."""

        return self._reference

    @property
    def candidates(self) -> tuple[CandidatePoint, ...]:
        """Candidates in insertion order."""

        return tuple(self._candidates)

    @property
    def inside_count(self) -> int:
        """Number of candidates within the reference radius."""

        return self._inside_count

    def __len__(self) -> int:
        return len(self._candidates)

    def set_reference_point(self, lat: float, lng: float, radius_m: float) -> ReferencePoint:
        """Replace the reference point and reclassify every candidate.

        Raises:
            CoordinateRangeError: In strict mode, if a value is out of range.
                State is left untouched in that case.
        """

        point = GeoPoint(float(lat), float(lng))
        radius = float(radius_m)
        if self._strict:
            validate_geo_point(point)
            validate_radius(radius)

        self._reference = ReferencePoint(point, radius)
        logger.info("参考点更新：lat=%s, lng=%s, radius_m=%s", point.latitude, point.longitude, radius)
        self.reclassify_all()
        return self._reference

    def add_candidate_point(self, lat: float | None, lng: float | None) -> CandidatePoint | None:
        """Classify a new point against the reference and append it.

        Returns:
            The new candidate, or None if either coordinate is missing (no-op).

        Raises:
            CoordinateRangeError: In strict mode, if the point is out of range.
        """

        if lat is None or lng is None:
            logger.debug("缺少坐标，忽略：lat=%r, lng=%r", lat, lng)
            return None

        point = GeoPoint(float(lat), float(lng))
        if self._strict:
            validate_geo_point(point)

        candidate = self._classify(point)
        self._candidates.append(candidate)
        self._recount()
        return candidate

    def add_candidate_points(self, points: Iterable[GeoPoint | tuple[float | None, float | None]]) -> int:
        """Add many points at once; rows missing a coordinate are skipped.

        In strict mode the whole batch is validated before anything is added.

        Returns:
            Number of points added.
        """

        batch: list[GeoPoint] = []
        for item in points:
            if isinstance(item, GeoPoint):
                p = item
            else:
                lat, lng = item
                if lat is None or lng is None:
                    continue
                p = GeoPoint(float(lat), float(lng))
            if self._strict:
                validate_geo_point(p)
            batch.append(p)

        self._candidates.extend(self._classify(p) for p in batch)
        self._recount()
        logger.info("批量添加 %s 个点（总数=%s，半径内=%s）", len(batch), len(self._candidates), self._inside_count)
        return len(batch)

    def reclassify_all(self) -> None:
        """Recompute distance and membership of every candidate, then recount."""

        # Build the full list first so callers never see a half-updated list.
        self._candidates = [self._classify(c.point) for c in self._candidates]
        self._recount()
        logger.info("重新分类：总数=%s，半径内=%s", len(self._candidates), self._inside_count)

    def clear(self) -> None:
        """Remove all candidates."""

        self._candidates = []
        self._recount()

    def summary(self) -> RegistrySummary:
        return RegistrySummary(total=len(self._candidates), inside=self._inside_count)

    def _classify(self, point: GeoPoint) -> CandidatePoint:
        d = distance_m(self._reference.point, point)
        return CandidatePoint(point=point, distance_m=d, is_inside=within_radius(d, self._reference.radius_m))

    def _recount(self) -> None:
        self._inside_count = count_inside(self._candidates)


def count_inside(candidates: Sequence[CandidatePoint]) -> int:
    """Count candidates flagged inside."""

    return sum(1 for c in candidates if c.is_inside)
