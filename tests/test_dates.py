"""
Tests for the date heuristics
"""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quality_agents.data_profiler.dates import (
    DateKind,
    date_range,
    detect_date_format,
    is_date_like,
    looks_like_birthday,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_unix_seconds_string():
    result = detect_date_format("1700000000")
    assert result.kind == DateKind.UNIX_SECONDS
    assert result.value == utc(2023, 11, 14, 22, 13, 20)


def test_unix_milliseconds():
    result = detect_date_format(1700000000000)
    assert result.kind == DateKind.UNIX_MS
    assert result.value == utc(2023, 11, 14, 22, 13, 20)


def test_excel_serial():
    result = detect_date_format(45000)
    assert result.kind == DateKind.EXCEL
    assert result.value == utc(2023, 3, 15)


def test_excel_window_is_exclusive():
    assert detect_date_format(59) is None
    assert detect_date_format(60).kind == DateKind.EXCEL


@pytest.mark.parametrize("value, kind, expected", [
    ("2021-03-07", DateKind.ISO, utc(2021, 3, 7)),
    ("March 7, 2021", DateKind.ISO, utc(2021, 3, 7)),
    ("25/12/2020", DateKind.SLASH, utc(2020, 12, 25)),
    ("25/12/20", DateKind.SLASH, utc(2020, 12, 25)),
    ("2020/12/25", DateKind.YYYY_SLASH, utc(2020, 12, 25)),
    ("25-12-2020", DateKind.DASH, utc(2020, 12, 25)),
])
def test_string_layouts(value, kind, expected):
    result = detect_date_format(value)
    assert result.kind == kind
    assert result.value == expected


def test_date_objects_pass_through():
    assert detect_date_format(date(2020, 1, 2)).value == utc(2020, 1, 2)
    assert detect_date_format(datetime(2020, 1, 2, 3, 4)).value == utc(2020, 1, 2, 3, 4)


@pytest.mark.parametrize("value", [
    None, "", "hello", "12", 12, "31/02/2020", "12-25-2020", "May",
    "T1", "M3", "1st", "5 pm", "March 2021",
])
def test_not_dates(value):
    assert detect_date_format(value) is None
    assert not is_date_like(value)


def test_date_range_skips_unparseable():
    low, high = date_range(["2021-03-07", "01/01/2020", None, "x"])
    assert low == utc(2020, 1, 1)
    assert high == utc(2021, 3, 7)
    assert date_range(["x", None]) is None


def test_looks_like_birthday():
    today = date(2026, 1, 1)
    assert looks_like_birthday(["1990-05-01", "1985-01-01"], today=today)
    assert not looks_like_birthday(["1850-01-01", "1990-05-01"], today=today)
    assert not looks_like_birthday(["2026-02-01"], today=today)
    assert not looks_like_birthday([], today=today)
