"""Route accumulation: append-only polyline plus running distance."""

from __future__ import annotations

from typing import Iterator

from run_tracker.geo import distance_m
from run_tracker.models import Coordinate


class Route:
    """Ordered, append-only sequence of coordinates in sampling order."""

    __slots__ = ("_points",)

    def __init__(self) -> None:
        self._points: list[Coordinate] = []

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._points)

    def __getitem__(self, index: int) -> Coordinate:
        return self._points[index]

    @property
    def last(self) -> Coordinate | None:
        return self._points[-1] if self._points else None

    def to_list(self) -> list[Coordinate]:
        return list(self._points)

    def _append(self, coord: Coordinate) -> None:
        self._points.append(coord)

    def _clear(self) -> None:
        self._points.clear()


def add_point(route: Route, coord: Coordinate) -> tuple[Route, float]:
    """Append a coordinate and return the distance it adds.

    Args:
        route: Route to extend.
        coord: Newly sampled coordinate.

    Returns:
        (route, increment_m). The increment is 0.0 for the first point, otherwise
        the haversine distance from the previous last point. The point is
        appended even when the increment is 0.
    """

    last = route.last
    route._append(coord)
    if last is None:
        return route, 0.0
    return route, distance_m(last, coord)


class RouteAccumulator:
    """Owns a route and its total distance.

    The total only ever grows: increments that are not strictly positive are
    ignored. No smoothing or outlier rejection is applied.
    """

    def __init__(self) -> None:
        self.route = Route()
        self.distance_m = 0.0

    def add(self, coord: Coordinate) -> float:
        """Add one fix and return the increment that was applied."""

        _, increment = add_point(self.route, coord)
        if increment > 0:
            self.distance_m += increment
            return increment
        return 0.0

    def reset(self) -> None:
        self.route._clear()
        self.distance_m = 0.0
