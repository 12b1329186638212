"""Achievements and streaks computed from a user's saved runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from run_tracker.models import RunRecord
from run_tracker.timeutils import parse_iso, utc_date

STREAK_WINDOW_DAYS = 365


@dataclass(frozen=True, slots=True)
class Achievement:
    """An unlockable badge."""

    id: str
    title: str
    description: str
    unlocked: bool
    unlocked_at: str | None = None


def _run_days(runs: Iterable[RunRecord]) -> set[date]:
    days: set[date] = set()
    for r in runs:
        try:
            days.add(utc_date(r.date_iso))
        except ValueError:
            continue
    return days


def current_streak(runs: Iterable[RunRecord], today: date) -> int:
    """Consecutive days with a run, counting back from ``today``.

    Stops at the first day without a run, so a gap yesterday gives 1 even when
    an older streak was longer. Capped at 365 days.
    """

    days = _run_days(runs)
    streak = 0
    for i in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=i) not in days:
            break
        streak += 1
    return streak


def longest_streak(runs: Iterable[RunRecord], today: date) -> int:
    """Longest run of consecutive days with at least one run.

    Only the last 365 days (counting back from ``today``) are considered.
    """

    days = _run_days(runs)
    if not days:
        return 0

    longest = 0
    current = 0
    for i in range(STREAK_WINDOW_DAYS):
        if today - timedelta(days=i) in days:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def compute_achievements(runs: Sequence[RunRecord], today: date) -> list[Achievement]:
    """Evaluate all achievements for a user's runs.

    Args:
        runs: Saved runs in any order.
        today: Reference day for streaks (UTC).

    Returns:
        Achievements in display order.
    """

    ordered = sorted(runs, key=lambda r: parse_iso(r.date_iso))
    first = ordered[0] if ordered else None
    first_5k = next((r for r in ordered if r.distance_meters >= 5000), None)
    total_m = sum(r.distance_meters for r in ordered)
    streak = longest_streak(ordered, today)
    latest = ordered[-1].date_iso if ordered else None

    ten_k = total_m >= 10_000
    return [
        Achievement(
            id="first_run",
            title="First Run Logged",
            description="Track your very first run.",
            unlocked=first is not None,
            unlocked_at=first.date_iso if first else None,
        ),
        Achievement(
            id="first_5k",
            title="First 5K",
            description="Complete a single run of at least 5 km.",
            unlocked=first_5k is not None,
            unlocked_at=first_5k.date_iso if first_5k else None,
        ),
        Achievement(
            id="ten_k_total",
            title="10K Total",
            description="Accumulate at least 10 km across all runs.",
            unlocked=ten_k,
            unlocked_at=latest if ten_k else None,
        ),
        Achievement(
            id="streak_3",
            title="3-Day Streak",
            description="Run on 3 days in a row.",
            unlocked=streak >= 3,
            unlocked_at=latest if streak >= 3 else None,
        ),
        Achievement(
            id="streak_7",
            title="7-Day Streak",
            description="Run on 7 days in a row.",
            unlocked=streak >= 7,
            unlocked_at=latest if streak >= 7 else None,
        ),
    ]
