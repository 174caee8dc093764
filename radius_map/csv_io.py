"""CSV input/output for candidate point lists."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Sequence

from radius_map.models import CandidatePoint, GeoPoint, ReferencePoint
from radius_map.parsing import parse_coordinate

logger = logging.getLogger(__name__)

# Accepted header spellings, first match wins.
LAT_COLUMNS: tuple[str, ...] = ("latitude", "lat")
LNG_COLUMNS: tuple[str, ...] = ("longitude", "lng", "lon")

CLASSIFIED_FIELDNAMES: list[str] = [
    "index",
    "latitude",
    "longitude",
    "distance_m",
    "inside",
    "ref_latitude",
    "ref_longitude",
    "ref_radius_m",
]


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _pick_column(fieldnames: Sequence[str], candidates: Sequence[str]) -> str:
    lowered = {name.strip().lower(): name for name in fieldnames}
    for c in candidates:
        if c in lowered:
            return lowered[c]
    raise KeyError(f"CSV缺少必要字段（{' / '.join(candidates)}）。实际字段：{list(fieldnames)}")


def _read_points(f: IO[str]) -> tuple[list[GeoPoint], CsvSummary]:
    reader = csv.DictReader(f)
    fieldnames: Sequence[str] = reader.fieldnames or ()
    if not fieldnames:
        return [], CsvSummary(rows_total=0, rows_parsed=0, rows_skipped=0, fieldnames=())

    lat_col = _pick_column(fieldnames, LAT_COLUMNS)
    lng_col = _pick_column(fieldnames, LNG_COLUMNS)

    rows_total = 0
    parsed: list[GeoPoint] = []
    for row in reader:
        rows_total += 1
        lat = parse_coordinate(row.get(lat_col))
        lng = parse_coordinate(row.get(lng_col))
        if lat is None or lng is None:
            # 空行或损坏行，直接跳过
            continue
        parsed.append(GeoPoint(lat, lng))

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return parsed, summary


def load_geo_points(csv_path: str | Path) -> tuple[list[GeoPoint], CsvSummary]:
    """Load all points from a CSV with latitude/longitude (or lat/lng) columns.

    Args:
        csv_path: Path to the CSV.

    Returns:
        (points, summary)

    Raises:
        KeyError: If no latitude or longitude column is present.
    """

    p = Path(csv_path)
    with p.open("r", encoding="utf-8-sig", newline="") as f:
        return _read_points(f)


def read_geo_points(f: IO[str]) -> tuple[list[GeoPoint], CsvSummary]:
    """Same as :func:`load_geo_points` for an already-open text stream (e.g. an upload)."""

    return _read_points(f)


def decode_csv_bytes(data: bytes) -> str:
    """Decode uploaded CSV bytes: UTF-8 (with or without BOM), else GB18030.

    Excel on Chinese-locale Windows saves CSV as GBK, which GB18030 covers.

    Raises:
        UnicodeDecodeError: If neither encoding fits.
    """

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("CSV不是UTF-8编码，改用GB18030解码")
        return data.decode("gb18030")


def iter_geo_points(csv_path: str | Path) -> Iterator[GeoPoint]:
    """Yield GeoPoints row by row, skipping rows without both coordinates."""

    p = Path(csv_path)
    with p.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return
        lat_col = _pick_column(reader.fieldnames, LAT_COLUMNS)
        lng_col = _pick_column(reader.fieldnames, LNG_COLUMNS)
        for row in reader:
            lat = parse_coordinate(row.get(lat_col))
            lng = parse_coordinate(row.get(lng_col))
            if lat is None or lng is None:
                continue
            yield GeoPoint(lat, lng)


def classified_rows(
    candidates: Iterable[CandidatePoint],
    reference: ReferencePoint,
) -> list[dict[str, object]]:
    """Flatten candidates into table rows (also used by the UI table)."""

    return [
        {
            "index": i,
            "latitude": c.latitude,
            "longitude": c.longitude,
            "distance_m": round(c.distance_m, 2),
            "inside": c.is_inside,
            "ref_latitude": reference.latitude,
            "ref_longitude": reference.longitude,
            "ref_radius_m": reference.radius_m,
        }
        for i, c in enumerate(candidates, start=1)
    ]


def write_classified_csv(
    candidates: Iterable[CandidatePoint],
    reference: ReferencePoint,
    out: str | Path | IO[str],
) -> None:
    """Write classified candidates to CSV (path or text stream)."""

    rows = classified_rows(candidates, reference)
    if isinstance(out, (str, Path)):
        with Path(out).open("w", encoding="utf-8", newline="") as f:
            _write_rows(f, rows)
    else:
        _write_rows(out, rows)


def _write_rows(f: IO[str], rows: list[dict[str, object]]) -> None:
    w = csv.DictWriter(f, fieldnames=CLASSIFIED_FIELDNAMES)
    w.writeheader()
    for row in rows:
        w.writerow(row)
