"""Drive a tracking session from a recorded route."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from run_tracker.config import TrackerConfig
from run_tracker.finalizer import PendingRun, RunRejected
from run_tracker.models import RunRecord, RunSummary, TrackPoint
from run_tracker.sampler import ReplayLocationProvider
from run_tracker.session import RunTracker
from run_tracker.store import RunStore
from run_tracker.timer import ManualTicker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplayResult:
    """What happened when the replayed session was stopped."""

    outcome: RunRejected | PendingRun
    record: RunRecord | None
    summary: RunSummary | None
    pauses: int
    fixes_delivered: int


async def replay_route(
    points: Sequence[TrackPoint],
    *,
    config: TrackerConfig | None = None,
    store: RunStore | None = None,
    user_id: str = "local",
    save: bool = True,
    pause_gap_seconds: float | None = None,
) -> ReplayResult:
    """Replay recorded samples through a RunTracker as if they were live.

    The first sample is the single-shot start fix; the rest are emitted in
    order. The timer advances by the whole seconds between samples.

    Args:
        points: Samples in recording order.
        config: Tracker configuration.
        store: Run store used when the run is saved.
        user_id: Owner of the saved run.
        save: Save an accepted run (otherwise it is discarded).
        pause_gap_seconds: Gaps longer than this are replayed as pause/resume,
            so they do not count towards the elapsed time.

    Raises:
        ValueError: If there are no points.
    """

    if not points:
        raise ValueError("route has no points")

    provider = ReplayLocationProvider(points[0].coordinate)
    ticker = ManualTicker()
    summaries: list[RunSummary] = []
    tracker = RunTracker(
        provider,
        ticker,
        store=store,
        user_id=user_id,
        config=config,
        on_summary=summaries.append,
    )

    pauses = 0
    delivered = 0
    running_ms = 0
    ticks = 0
    try:
        await tracker.start()
        prev = points[0]
        for pt in points[1:]:
            gap_ms = max(0, pt.geo_time_ms - prev.geo_time_ms)
            if pause_gap_seconds is not None and gap_ms / 1000.0 > pause_gap_seconds:
                tracker.pause()
                await tracker.resume()
                pauses += 1
            else:
                running_ms += gap_ms
                ticks += ticker.advance(running_ms // 1000 - ticks)
            delivered += provider.emit(pt.coordinate)
            prev = pt

        outcome = tracker.stop()
        if outcome is None:
            raise RuntimeError("replayed session was not active when stopped")
        record: RunRecord | None = None
        if isinstance(outcome, PendingRun):
            if save:
                record = tracker.save()
            else:
                tracker.discard()
    finally:
        tracker.close()

    logger.info("replayed %s point(s), %s fix(es) delivered, %s pause(s)", len(points), delivered, pauses)
    return ReplayResult(
        outcome=outcome,
        record=record,
        summary=summaries[0] if summaries else None,
        pauses=pauses,
        fixes_delivered=delivered,
    )
