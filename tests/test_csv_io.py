"""
Tests for route CSV loading and writing (run_tracker/csv_io.py).
"""

import csv

import pytest

from run_tracker.csv_io import load_track_points, write_route_csv
from run_tracker.models import Coordinate


def test_load_skips_broken_rows(tmp_path):
    path = tmp_path / "route.csv"
    path.write_text(
        "geoTime,latitude,longitude,speed\n"
        "1700000000000,48.2082,16.3738,2.5\n"
        "oops,48.2083,16.3738,2.5\n"
        "1700000002000,48.2084,,2.5\n"
        "1700000003000,48.2085,16.3739,2.4\n",
        encoding="utf-8",
    )

    points, summary = load_track_points(path)

    assert [p.geo_time_ms for p in points] == [1700000000000, 1700000003000]
    assert points[1].coordinate == Coordinate(48.2085, 16.3739)
    assert summary.rows_total == 4
    assert summary.rows_parsed == 2
    assert summary.rows_skipped == 2
    assert list(summary.fieldnames) == ["geoTime", "latitude", "longitude", "speed"]


def test_missing_column_is_reported(tmp_path):
    path = tmp_path / "route.csv"
    path.write_text("time,lat,lon\n1,2,3\n", encoding="utf-8")
    with pytest.raises(KeyError, match="geoTime"):
        load_track_points(path)


def test_write_route_csv(tmp_path):
    out = tmp_path / "out.csv"
    n = write_route_csv([Coordinate(1.0, 2.0), Coordinate(3.0, 4.0)], out)

    assert n == 2
    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows == [
        {"seq": "1", "latitude": "1.0", "longitude": "2.0"},
        {"seq": "2", "latitude": "3.0", "longitude": "4.0"},
    ]
