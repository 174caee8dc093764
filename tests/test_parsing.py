"""Unit tests for coordinate text parsing."""

import pytest

from radius_map.parsing import parse_coordinate


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "abc", "1.2.3", float("nan"), "nan", "inf", "-inf", "1e999", float("inf")],
)
def test_missing_or_invalid_is_none(value):
    assert parse_coordinate(value) is None


@pytest.mark.parametrize(
    "value, expected",
    [("0", 0.0), (" 51.5007 ", 51.5007), ("-0.1246", -0.1246), ("1,5", 1.5), (0, 0.0), (12.25, 12.25)],
)
def test_numeric_values(value, expected):
    assert parse_coordinate(value) == expected
