"""Validation and conversion of a stopped session into a saved run."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from run_tracker.config import TrackerConfig
from run_tracker.metrics import RunMetrics
from run_tracker.models import Coordinate, RunRecord, RunSummary
from run_tracker.timeutils import iso_utc, utc_now


@dataclass(frozen=True, slots=True)
class RunRejected:
    """The session was too short to be saved; nothing is persisted."""

    title: str
    message: str
    points: int
    distance_m: float


@dataclass(frozen=True, slots=True)
class PendingRun:
    """A valid run waiting for the user's save/discard decision."""

    metrics: RunMetrics
    route: tuple[Coordinate, ...]

    @property
    def summary_text(self) -> str:
        return self.metrics.summary_text()


def finalize(
    route: Sequence[Coordinate],
    distance_m: float,
    elapsed_s: int,
    config: TrackerConfig,
) -> RunRejected | PendingRun:
    """Decide whether a stopped session can be offered for saving.

    Args:
        route: Route in sampling order.
        distance_m: Accumulated distance.
        elapsed_s: Accumulated running time.
        config: Thresholds (minimum points and distance).

    Returns:
        RunRejected if the route has too few points or the distance is below the
        minimum, otherwise a PendingRun with a frozen copy of the route.
    """

    if len(route) < config.min_route_points or distance_m < config.min_run_distance_m:
        return RunRejected(
            title="Run too short",
            message="We need a bit more distance to save this run.",
            points=len(route),
            distance_m=distance_m,
        )
    return PendingRun(
        metrics=RunMetrics(distance_m=distance_m, elapsed_s=elapsed_s),
        route=tuple(route),
    )


def build_record(pending: PendingRun, now: datetime | None = None) -> RunRecord:
    """Create the persisted record for an accepted run."""

    return RunRecord(
        id=uuid.uuid4().hex,
        date_iso=iso_utc(now or utc_now()),
        distance_meters=pending.metrics.distance_m,
        duration_sec=pending.metrics.elapsed_s,
    )


def build_summary(pending: PendingRun) -> RunSummary:
    """Payload for the downstream summary/sharing stage."""

    return RunSummary(
        distance_meters=pending.metrics.distance_m,
        duration_sec=pending.metrics.elapsed_s,
        route=pending.route,
    )
