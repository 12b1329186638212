"""Command-line interface for run_tracker.

Run:
    python -m run_tracker replay --csv route.csv --user alice
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path

from run_tracker.achievements import compute_achievements, current_streak, longest_streak
from run_tracker.config import TrackerConfig
from run_tracker.csv_io import load_track_points, write_route_csv
from run_tracker.errors import TrackerError
from run_tracker.finalizer import RunRejected
from run_tracker.geo import region_from_coords
from run_tracker.metrics import RunMetrics, estimate_run_calories
from run_tracker.models import DEFAULT_TZ
from run_tracker.profile import ProfileSource, SourceKind, resolve_profile
from run_tracker.replay import replay_route
from run_tracker.sampler import SamplerOptions
from run_tracker.store import JsonRunStore
from run_tracker.timeutils import dt_from_epoch_ms, parse_iso, tzinfo_from_name, utc_now

logger = logging.getLogger(__name__)


def _print_metrics(metrics: RunMetrics, weight_kg: float | None) -> None:
    print(metrics.summary_text())
    if weight_kg is not None:
        kcal = estimate_run_calories(weight_kg, metrics.distance_m, metrics.elapsed_s)
        print(f"Calories: ~{kcal} kcal")


def _cmd_replay(args: argparse.Namespace) -> int:
    points, summary = load_track_points(args.csv)
    if not points:
        print(f"No usable points in {args.csv} (rows={summary.rows_total})", file=sys.stderr)
        return 1

    config = TrackerConfig(
        sampler=SamplerOptions(min_distance_m=args.min_distance_m),
        min_run_distance_m=args.min_run_distance_m,
    )
    try:
        start = dt_from_epoch_ms(points[0].geo_time_ms, args.tz)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    store = JsonRunStore(args.store)
    store.ensure_persistent_files()
    print(f"Replaying {len(points)} point(s) from {start.isoformat(sep=' ')}")

    try:
        result = asyncio.run(
            replay_route(
                points,
                config=config,
                store=store,
                user_id=args.user,
                save=not args.discard,
                pause_gap_seconds=args.pause_gap_seconds,
            )
        )
    except TrackerError as exc:
        print(f"Tracking failed: {exc}", file=sys.stderr)
        return 1

    if isinstance(result.outcome, RunRejected):
        print(f"{result.outcome.title}: {result.outcome.message}")
        return 1

    _print_metrics(result.outcome.metrics, args.weight_kg)
    if result.pauses:
        print(f"Pauses: {result.pauses}")

    if result.record is None:
        print("Run discarded.")
        return 0

    store.flush()
    print(f"Saved run {result.record.id} for {args.user} -> {store.path}")

    if result.summary is not None and args.summary_out:
        payload = result.summary.to_dict()
        region = region_from_coords(result.summary.route)
        payload["region"] = {
            "latitude": region.latitude,
            "longitude": region.longitude,
            "latitudeDelta": region.latitude_delta,
            "longitudeDelta": region.longitude_delta,
        }
        Path(args.summary_out).write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"Summary written: {args.summary_out}")
    if result.summary is not None and args.route_out:
        n = write_route_csv(result.summary.route, args.route_out)
        print(f"Route written: {args.route_out} ({n} point(s))")
    return 0


def _cmd_runs(args: argparse.Namespace) -> int:
    store = JsonRunStore(args.store)
    runs = store.list_runs(args.user)
    profile = resolve_profile(
        [
            ProfileSource(SourceKind.DEFAULT),
            ProfileSource(SourceKind.CACHE, username=args.user, display_name=args.display_name),
        ]
    )

    if args.json:
        print(json.dumps([r.to_dict() for r in runs], ensure_ascii=False, indent=2))
        return 0

    try:
        tz = tzinfo_from_name(args.tz)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"### Runs for {profile.display_name} ({len(runs)})")
    for r in runs:
        m = RunMetrics(distance_m=r.distance_meters, elapsed_s=r.duration_sec)
        when = parse_iso(r.date_iso).astimezone(tz).strftime("%Y-%m-%d %H:%M")
        print(f"{when}  {m.distance_text:>7} km  {m.time_text}  {m.pace_text} /km  [{r.id}]")
    if not runs:
        others = [u for u in store.users() if u != args.user]
        if others:
            print(f"(no runs for {args.user}; known users: {', '.join(others)})")
    return 0


def _cmd_achievements(args: argparse.Namespace) -> int:
    store = JsonRunStore(args.store)
    runs = store.list_runs(args.user)
    today = date.fromisoformat(args.today) if args.today else utc_now().date()

    print(f"Day streak: {current_streak(runs, today)} day(s)")
    print(f"Longest streak: {longest_streak(runs, today)} day(s)")
    for a in compute_achievements(runs, today):
        mark = "x" if a.unlocked else " "
        suffix = f" (unlocked {a.unlocked_at})" if a.unlocked_at else ""
        print(f"[{mark}] {a.title}: {a.description}{suffix}")
    return 0


def _cmd_pace(args: argparse.Namespace) -> int:
    if args.distance_m < 0 or args.duration_s < 0:
        print("distance and duration must be >= 0", file=sys.stderr)
        return 1
    _print_metrics(RunMetrics(distance_m=args.distance_m, elapsed_s=args.duration_s), args.weight_kg)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="run_tracker")
    p.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_rep = sub.add_parser("replay", help="replay a recorded route CSV as a live run")
    p_rep.add_argument("--csv", type=str, required=True, help="route CSV (geoTime, latitude, longitude)")
    p_rep.add_argument("--store", type=str, default="runs.json", help="run store JSON path")
    p_rep.add_argument("--user", type=str, default="local", help="owner of the saved run")
    p_rep.add_argument("--tz", type=str, default=DEFAULT_TZ, help="timezone (IANA) for display")
    p_rep.add_argument("--discard", action="store_true", help="discard the run instead of saving it")
    p_rep.add_argument(
        "--min-run-distance-m",
        type=float,
        default=10.0,
        help="runs shorter than this are rejected",
    )
    p_rep.add_argument(
        "--min-distance-m",
        type=float,
        default=3.0,
        help="minimum movement between two location reports",
    )
    p_rep.add_argument(
        "--pause-gap-seconds",
        type=float,
        default=None,
        help="replay gaps longer than this as a pause (excluded from elapsed time)",
    )
    p_rep.add_argument("--weight-kg", type=float, default=None, help="print a calorie estimate")
    p_rep.add_argument("--summary-out", type=str, default=None, help="write the hand-off summary JSON here")
    p_rep.add_argument("--route-out", type=str, default=None, help="write the accepted route CSV here")
    p_rep.set_defaults(func=_cmd_replay)

    p_runs = sub.add_parser("runs", help="list saved runs, newest first")
    p_runs.add_argument("--store", type=str, default="runs.json", help="run store JSON path")
    p_runs.add_argument("--user", type=str, default="local", help="run owner")
    p_runs.add_argument("--display-name", type=str, default=None, help="name shown in the header")
    p_runs.add_argument("--tz", type=str, default=DEFAULT_TZ, help="timezone (IANA)")
    p_runs.add_argument("--json", action="store_true", help="print raw records as JSON")
    p_runs.set_defaults(func=_cmd_runs)

    p_ach = sub.add_parser("achievements", help="show achievements, the current and the longest streak")
    p_ach.add_argument("--store", type=str, default="runs.json", help="run store JSON path")
    p_ach.add_argument("--user", type=str, default="local", help="run owner")
    p_ach.add_argument("--today", type=str, default=None, help="reference day YYYY-MM-DD (default: today, UTC)")
    p_ach.set_defaults(func=_cmd_achievements)

    p_pace = sub.add_parser("pace", help="format time/distance/pace for a run")
    p_pace.add_argument("--distance-m", type=float, required=True)
    p_pace.add_argument("--duration-s", type=int, required=True)
    p_pace.add_argument("--weight-kg", type=float, default=None)
    p_pace.set_defaults(func=_cmd_pace)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
