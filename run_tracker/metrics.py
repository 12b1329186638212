"""Derived run metrics and their display formatting."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

PACE_PLACEHOLDER: Final[str] = "--:--"


def format_hhmmss(seconds: float) -> str:
    """Format a duration as zero-padded HH:MM:SS."""

    s = int(max(0, seconds))
    h = s // 3600
    m = (s % 3600) // 60
    sec = s % 60
    return f"{h:02d}:{m:02d}:{sec:02d}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_pace(min_per_km: float) -> str:
    """Format a pace in minutes per km as MM:SS.

    The seconds are rounded (half up) from the fractional minute; a value that
    rounds to 60 seconds rolls over into the next minute.
    """

    total_s = _round_half_up(max(0.0, min_per_km) * 60.0)
    m, s = divmod(total_s, 60)
    return f"{m:02d}:{s:02d}"


@dataclass(frozen=True, slots=True)
class RunMetrics:
    """Metrics derived from the accumulated distance and elapsed time.

    Nothing here is stored on the session; instances are built on demand.
    """

    distance_m: float
    elapsed_s: int

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0

    @property
    def pace_min_per_km(self) -> float:
        """Minutes per kilometer, 0.0 while no distance is recorded."""

        km = self.distance_km
        if km > 0:
            return (self.elapsed_s / 60.0) / km
        return 0.0

    @property
    def time_text(self) -> str:
        return format_hhmmss(self.elapsed_s)

    @property
    def distance_text(self) -> str:
        return f"{self.distance_km:.2f}"

    @property
    def pace_text(self) -> str:
        if self.distance_km > 0:
            return format_pace(self.pace_min_per_km)
        return PACE_PLACEHOLDER

    def summary_text(self) -> str:
        """Multi-line summary shown before the save/discard decision."""

        return f"Distance: {self.distance_text} km\nTime: {self.time_text}\nPace: {self.pace_text} /km"


def estimate_run_calories(weight_kg: float, distance_m: float, duration_s: float) -> int:
    """Estimate calories burned using a speed-banded MET value.

    Args:
        weight_kg: Runner weight in kilograms.
        distance_m: Distance in meters.
        duration_s: Duration in seconds.

    Returns:
        Rounded kcal, or 0 if any input is not positive.
    """

    if duration_s <= 0 or distance_m <= 0 or weight_kg <= 0:
        return 0
    hours = duration_s / 3600.0
    speed_kmh = (distance_m / 1000.0) / hours
    if speed_kmh < 6:
        met = 4.0
    elif speed_kmh < 9:
        met = 7.5
    elif speed_kmh < 12:
        met = 9.8
    elif speed_kmh < 15:
        met = 11.0
    else:
        met = 12.5
    return _round_half_up(met * weight_kg * hours)
