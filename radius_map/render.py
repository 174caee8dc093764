"""pydeck layers for the map widget.

Builds plain dicts/layers from registry state; nothing here touches the
registry, it only reads what the registry exposes.
"""

from __future__ import annotations

import math
from typing import Any, Final, Sequence

import pydeck as pdk

from radius_map.geo import circle_polygon
from radius_map.models import DEFAULT_ZOOM, FOCUS_ZOOM, CandidatePoint, ReferencePoint

MARKER_ICON_URL: Final[str] = "https://cdnjs.cloudflare.com/ajax/libs/leaflet/1.7.1/images/marker-icon.png"
MARKER_ICON: Final[dict[str, Any]] = {
    "url": MARKER_ICON_URL,
    "width": 25,
    "height": 41,
    "anchorY": 41,
}

INSIDE_COLOR: Final[list[int]] = [255, 255, 0]
OUTSIDE_COLOR: Final[list[int]] = [255, 0, 0]
BORDER_COLOR: Final[list[int]] = [0, 0, 0]
CIRCLE_COLOR: Final[list[int]] = [0, 128, 0]

CANDIDATE_RADIUS_PX: Final[int] = 6
CANDIDATE_OPACITY: Final[float] = 0.8
CIRCLE_FILL_OPACITY: Final[float] = 0.2


def popup_text(candidate: CandidatePoint) -> str:
    """Tooltip text for a candidate, distance in meters with 2 decimals."""

    return f"Lat: {candidate.latitude}, Lng: {candidate.longitude}, Dist: {candidate.distance_m:.2f}m"


def candidate_color(candidate: CandidatePoint) -> list[int]:
    """Fill color (RGBA) by membership."""

    alpha = int(round(255 * CANDIDATE_OPACITY))
    base = INSIDE_COLOR if candidate.is_inside else OUTSIDE_COLOR
    return [*base, alpha]


def candidate_records(candidates: Sequence[CandidatePoint]) -> list[dict[str, Any]]:
    """Per-candidate data rows for the scatterplot layer."""

    return [
        {
            "latitude": c.latitude,
            "longitude": c.longitude,
            "distance_m": c.distance_m,
            "inside": c.is_inside,
            "fill_color": candidate_color(c),
            "label": popup_text(c),
        }
        for c in candidates
    ]


def reference_records(reference: ReferencePoint) -> list[dict[str, Any]]:
    return [
        {
            "latitude": reference.latitude,
            "longitude": reference.longitude,
            "icon_data": MARKER_ICON,
            "label": f"Lat: {reference.latitude}, Lng: {reference.longitude}, Radius: {reference.radius_m:.2f}m",
        }
    ]


def circle_records(reference: ReferencePoint) -> list[dict[str, Any]]:
    if not math.isfinite(reference.radius_m) or reference.radius_m <= 0:
        return []
    ring = circle_polygon(reference.latitude, reference.longitude, reference.radius_m)
    return [{"polygon": ring, "label": f"Radius: {reference.radius_m:.2f}m"}]


def build_layers(reference: ReferencePoint | None, candidates: Sequence[CandidatePoint]) -> list[pdk.Layer]:
    """Circle, then candidates, then the reference marker on top."""

    layers: list[pdk.Layer] = []
    if reference is not None:
        layers.append(
            pdk.Layer(
                "PolygonLayer",
                data=circle_records(reference),
                id="reference-circle",
                get_polygon="polygon",
                get_fill_color=[*CIRCLE_COLOR, int(round(255 * CIRCLE_FILL_OPACITY))],
                get_line_color=[*CIRCLE_COLOR, 255],
                line_width_min_pixels=2,
                stroked=True,
                filled=True,
                pickable=True,
            )
        )

    layers.append(
        pdk.Layer(
            "ScatterplotLayer",
            data=candidate_records(candidates),
            id="candidates",
            get_position="[longitude, latitude]",
            get_fill_color="fill_color",
            get_line_color=BORDER_COLOR,
            radius_units="pixels",
            get_radius=CANDIDATE_RADIUS_PX,
            line_width_units="pixels",
            get_line_width=1,
            stroked=True,
            filled=True,
            pickable=True,
        )
    )

    if reference is not None:
        layers.append(
            pdk.Layer(
                "IconLayer",
                data=reference_records(reference),
                id="reference-marker",
                get_icon="icon_data",
                get_position="[longitude, latitude]",
                size_units="pixels",
                get_size=41,
                pickable=True,
            )
        )
    return layers


def view_state(reference: ReferencePoint | None) -> pdk.ViewState:
    """World view until a reference point is committed, then center on it."""

    if reference is None:
        return pdk.ViewState(latitude=0.0, longitude=0.0, zoom=DEFAULT_ZOOM)
    return pdk.ViewState(latitude=reference.latitude, longitude=reference.longitude, zoom=FOCUS_ZOOM)


def build_deck(reference: ReferencePoint | None, candidates: Sequence[CandidatePoint]) -> pdk.Deck:
    """Assemble the deck for ``st.pydeck_chart``.

    Pass ``reference=None`` before the user has committed a reference point:
    the map then shows only candidates at the world view.
    """

    return pdk.Deck(
        layers=build_layers(reference, candidates),
        initial_view_state=view_state(reference),
        map_provider="carto",
        map_style="light",
        tooltip={"text": "{label}"},
    )
