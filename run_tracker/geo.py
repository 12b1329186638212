"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final, Sequence

from run_tracker.models import Coordinate, Region

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius in meters


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in meters between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in meters.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def initial_region(coord: Coordinate, delta: float = 0.01) -> Region:
    """Viewing region centred on the first fix of a session."""

    return Region(
        latitude=coord.latitude,
        longitude=coord.longitude,
        latitude_delta=delta,
        longitude_delta=delta,
    )


def region_from_coords(coords: Sequence[Coordinate], min_delta: float = 0.01, padding: float = 1.4) -> Region:
    """Compute a region that frames the whole route.

    Args:
        coords: Route coordinates (at least one).
        min_delta: Smallest span in degrees, so short routes are not over-zoomed.
        padding: Multiplier applied to the span.

    Raises:
        ValueError: If coords is empty.
    """

    if not coords:
        raise ValueError("cannot compute a region for an empty route")

    lats = [c.latitude for c in coords]
    lons = [c.longitude for c in coords]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)
    return Region(
        latitude=(min_lat + max_lat) / 2.0,
        longitude=(min_lon + max_lon) / 2.0,
        latitude_delta=max(max_lat - min_lat, min_delta) * padding,
        longitude_delta=max(max_lon - min_lon, min_delta) * padding,
    )
