"""
Unit tests for run_tracker/metrics.py
"""

import pytest

from run_tracker.metrics import (
    PACE_PLACEHOLDER,
    RunMetrics,
    estimate_run_calories,
    format_hhmmss,
    format_pace,
)


class TestFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "00:00:00"), (59, "00:00:59"), (600, "00:10:00"), (3661, "01:01:01"), (36000, "10:00:00")],
    )
    def test_hhmmss(self, seconds, expected):
        assert format_hhmmss(seconds) == expected

    def test_pace_rounds_seconds(self):
        # 6.667 min/km -> 400 s/km
        assert format_pace(6.667) == "06:40"
        assert format_pace(5.0) == "05:00"
        # 4.5 min -> 270 s
        assert format_pace(4.5) == "04:30"

    def test_pace_rounds_half_up(self):
        # 22.5 s exactly; banker's rounding would give 22
        assert format_pace(0.375) == "00:23"

    def test_pace_carries_sixty_seconds(self):
        # 6 min 59.8 s rounds to 7:00, never 6:60
        assert format_pace(6 + 59.8 / 60) == "07:00"


class TestRunMetrics:
    def test_save_example(self):
        m = RunMetrics(distance_m=1500.0, elapsed_s=600)
        assert m.distance_km == 1.5
        assert m.pace_min_per_km == pytest.approx(6.6667, abs=1e-3)
        assert m.pace_text == "06:40"
        assert m.time_text == "00:10:00"
        assert m.distance_text == "1.50"

    def test_zero_distance_uses_placeholder(self):
        m = RunMetrics(distance_m=0.0, elapsed_s=120)
        assert m.pace_min_per_km == 0.0
        assert m.pace_text == PACE_PLACEHOLDER

    def test_summary_text(self):
        text = RunMetrics(distance_m=5000.0, elapsed_s=1500).summary_text()
        assert text == "Distance: 5.00 km\nTime: 00:25:00\nPace: 05:00 /km"


class TestCalories:
    def test_invalid_inputs_give_zero(self):
        assert estimate_run_calories(0, 5000, 1800) == 0
        assert estimate_run_calories(70, 0, 1800) == 0
        assert estimate_run_calories(70, 5000, 0) == 0

    def test_jog_band(self):
        # 5 km in 40 min = 7.5 km/h -> MET 7.5; 7.5 * 70 * (2/3) = 350
        assert estimate_run_calories(70, 5000, 2400) == 350

    def test_faster_runs_burn_more_per_hour(self):
        slow = estimate_run_calories(70, 5000, 3600)  # 5 km/h
        fast = estimate_run_calories(70, 13000, 3600)  # 13 km/h
        assert slow == 280
        assert fast == 770
