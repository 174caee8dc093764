"""Tests for candidate CSV import/export."""

import csv
import io

import pytest

from radius_map.csv_io import (
    decode_csv_bytes,
    iter_geo_points,
    load_geo_points,
    read_geo_points,
    write_classified_csv,
)
from radius_map.models import GeoPoint
from radius_map.registry import PointRegistry


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestLoad:
    def test_latitude_longitude_headers(self, tmp_path):
        p = _write(tmp_path / "points.csv", "latitude,longitude\n0,0.005\n0,0.01\n")
        points, summary = load_geo_points(p)
        assert points == [GeoPoint(0.0, 0.005), GeoPoint(0.0, 0.01)]
        assert (summary.rows_total, summary.rows_parsed, summary.rows_skipped) == (2, 2, 0)

    def test_short_headers_and_bad_rows(self, tmp_path, caplog):
        p = _write(tmp_path / "points.csv", "name,Lat,Lng\na,1,2\nb,,3\nc,x,4\nd,5,6\n")
        with caplog.at_level("WARNING"):
            points, summary = load_geo_points(p)
        assert points == [GeoPoint(1.0, 2.0), GeoPoint(5.0, 6.0)]
        assert summary.rows_skipped == 2
        assert "2" in caplog.text

    def test_non_finite_rows_are_skipped(self, tmp_path):
        p = _write(tmp_path / "points.csv", "latitude,longitude\ninf,0\n0,-inf\n1e999,1\n1,2\n")
        points, summary = load_geo_points(p)
        assert points == [GeoPoint(1.0, 2.0)]
        assert summary.rows_skipped == 3

    def test_missing_column_raises(self, tmp_path):
        p = _write(tmp_path / "points.csv", "latitude,foo\n1,2\n")
        with pytest.raises(KeyError):
            load_geo_points(p)

    def test_empty_file(self, tmp_path):
        p = _write(tmp_path / "points.csv", "")
        points, summary = load_geo_points(p)
        assert points == []
        assert summary.rows_total == 0

    def test_iter_matches_load(self, tmp_path):
        p = _write(tmp_path / "points.csv", "lat,lon\n1,2\n,\n3,4\n")
        assert list(iter_geo_points(p)) == load_geo_points(p)[0]

    def test_read_from_stream(self):
        points, _ = read_geo_points(io.StringIO("latitude,longitude\n10,20\n"))
        assert points == [GeoPoint(10.0, 20.0)]


def test_write_classified_csv(tmp_path):
    registry = PointRegistry()
    registry.add_candidate_points([(0.0, 0.005), (0.0, 0.01)])
    out = tmp_path / "classified.csv"
    write_classified_csv(registry.candidates, registry.reference, out)

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["inside"] for r in rows] == ["True", "False"]
    assert [r["index"] for r in rows] == ["1", "2"]
    assert float(rows[0]["distance_m"]) == pytest.approx(555.97, abs=0.01)
    assert rows[0]["ref_radius_m"] == "1000.0"


def test_write_classified_csv_to_stream():
    registry = PointRegistry()
    buf = io.StringIO()
    write_classified_csv(registry.candidates, registry.reference, buf)
    assert buf.getvalue().splitlines() == [
        assert decode_csv_bytes("\ufefflatitude,longitude\n".encode("utf-8")) == "latitude,longitude\n"
    ]


class TestDecode:
    def test_utf8_with_bom(self):
        assert decode_csv_bytes("﻿latitude,longitude\n".encode("utf-8")) == "latitude,longitude\n"

    def test_gbk_excel_export(self):
        text = "latitude,longitude\n31.2,121.5\n# 上海\n"
        assert decode_csv_bytes(text.encode("gbk")) == text

    def test_undecodable_bytes_raise(self):
        with pytest.raises(UnicodeDecodeError):
            decode_csv_bytes(b"latitude,longitude\n\xff\n")
