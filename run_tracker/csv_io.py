"""CSV input/output for recorded routes."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from run_tracker.models import Coordinate, TrackPoint

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("geoTime", "latitude", "longitude")


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_int(value: str) -> int:
    return int(value.strip())


def _parse_float(value: str) -> float:
    return float(value.strip())


def load_track_points(csv_path: str | Path) -> tuple[list[TrackPoint], CsvSummary]:
    """Load a recorded route.

    Args:
        csv_path: CSV with ``geoTime`` (epoch ms), ``latitude`` and ``longitude``
            columns. Extra columns are ignored.

    Returns:
        (points in file order, summary)

    Raises:
        KeyError: If a required column is missing.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[TrackPoint] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames: Sequence[str] = reader.fieldnames or ()
        missing = [name for name in REQUIRED_FIELDS if name not in fieldnames]
        if missing:
            raise KeyError(f"route CSV is missing column(s) {missing}; found {list(fieldnames)}")

        for row in reader:
            rows_total += 1
            try:
                parsed.append(
                    TrackPoint(
                        geo_time_ms=_parse_int(row["geoTime"]),
                        latitude=_parse_float(row["latitude"]),
                        longitude=_parse_float(row["longitude"]),
                    )
                )
            except (AttributeError, ValueError, TypeError):
                # broken/empty rows are skipped
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("skipped %s unparseable row(s) in %s", summary.rows_skipped, p)
    return parsed, summary


def write_route_csv(route: Iterable[Coordinate], out_path: str | Path) -> int:
    """Write route coordinates (in order) to CSV; returns the row count."""

    p = Path(out_path)
    n = 0
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["seq", "latitude", "longitude"])
        w.writeheader()
        for n, c in enumerate(route, start=1):
            w.writerow({"seq": n, "latitude": c.latitude, "longitude": c.longitude})
    return n
