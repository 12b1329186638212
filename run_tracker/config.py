"""Tracker configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from run_tracker.sampler import Accuracy, SamplerOptions


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Parameters for a tracking session.

    Attributes:
        sampler: Options for the continuous location subscription.
        start_accuracy: Accuracy of the single-shot fix taken on start.
        tick_seconds: Wall-clock timer period; each tick adds one elapsed second.
        min_run_distance_m: Runs shorter than this are rejected on stop.
        min_route_points: Runs with fewer points are rejected on stop.
        region_delta: Span in degrees of the initial map region.
    """

    sampler: SamplerOptions = field(default_factory=SamplerOptions)
    start_accuracy: Accuracy = Accuracy.HIGH
    tick_seconds: float = 1.0
    min_run_distance_m: float = 10.0
    min_route_points: int = 2
    region_delta: float = 0.01

    def __post_init__(self) -> None:
        if self.tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {self.tick_seconds!r}")
        if self.min_run_distance_m < 0:
            raise ValueError(f"min_run_distance_m must be >= 0, got {self.min_run_distance_m!r}")
        if self.min_route_points < 1:
            raise ValueError(f"min_route_points must be >= 1, got {self.min_route_points!r}")
