from __future__ import annotations

import asyncio
from pathlib import Path

import streamlit as st

from run_tracker.achievements import compute_achievements, current_streak, longest_streak
from run_tracker.config import TrackerConfig
from run_tracker.csv_io import load_track_points
from run_tracker.finalizer import RunRejected
from run_tracker.metrics import RunMetrics
from run_tracker.models import DEFAULT_TZ, RunRecord
from run_tracker.profile import ProfileSource, SourceKind, resolve_profile
from run_tracker.replay import replay_route
from run_tracker.sampler import SamplerOptions
from run_tracker.store import JsonRunStore
from run_tracker.timeutils import parse_iso, tzinfo_from_name, utc_now


@st.cache_data(show_spinner=False)
def _load_runs(store_path: str, user_id: str, mtime: float) -> list[RunRecord]:
    _ = mtime  # part of cache key so updated files reload automatically
    return JsonRunStore(store_path).list_runs(user_id)


def _store_mtime(store_path: str) -> float:
    p = Path(store_path)
    journal = p.with_name(f"{p.stem}.journal.jsonl")
    return max((f.stat().st_mtime for f in (p, journal) if f.exists()), default=0.0)


def main() -> None:
    st.set_page_config(page_title="Run tracker", layout="wide")

    with st.sidebar:
        st.subheader("Runner")
        user_id = st.text_input("User id", value="local")
        display_name = st.text_input("Display name", value="")
        tz_name = st.text_input("Timezone (IANA)", value=DEFAULT_TZ)
        store_path = st.text_input("Run store (JSON)", value="runs.json")

        st.subheader("Replay a recorded route")
        route_csv = st.text_input("Route CSV", value="sample_data/route.csv")
        with st.expander("Advanced", expanded=False):
            min_run_distance_m = st.number_input("Minimum run distance (m)", value=10.0, step=5.0)
            min_distance_m = st.number_input("Minimum distance between fixes (m)", value=3.0, step=1.0)
            pause_gap = st.number_input("Treat gaps longer than (s) as a pause, 0 = never", value=0.0, step=10.0)
        save = st.checkbox("Save the run", value=True)

        if st.button("Replay route", type="primary", use_container_width=True):
            pcsv = Path(route_csv)
            if not pcsv.exists():
                st.error(f"File not found: {route_csv!r}")
            else:
                with st.spinner("Replaying route ..."):
                    points, _ = load_track_points(pcsv)
                    store = JsonRunStore(store_path)
                    try:
                        result = asyncio.run(
                            replay_route(
                                points,
                                config=TrackerConfig(
                                    sampler=SamplerOptions(min_distance_m=float(min_distance_m)),
                                    min_run_distance_m=float(min_run_distance_m),
                                ),
                                store=store,
                                user_id=user_id,
                                save=save,
                                pause_gap_seconds=float(pause_gap) if pause_gap > 0 else None,
                            )
                        )
                    except Exception as exc:
                        st.exception(exc)
                        result = None
                    if result is not None and result.record is not None:
                        store.flush()
                if result is not None:
                    st.session_state["last_replay"] = result

    profile = resolve_profile(
        [ProfileSource(SourceKind.DEFAULT), ProfileSource(SourceKind.CACHE, username=user_id, display_name=display_name)]
    )
    st.title(f"{profile.display_name}'s runs")

    result = st.session_state.get("last_replay")
    if result is not None:
        st.subheader("Last replay")
        if isinstance(result.outcome, RunRejected):
            st.warning(f"{result.outcome.title}: {result.outcome.message}")
        else:
            m = result.outcome.metrics
            c1, c2, c3 = st.columns(3)
            c1.metric("Time", m.time_text)
            c2.metric("Distance", f"{m.distance_text} km")
            c3.metric("Pace", f"{m.pace_text} /km")
            st.map(
                [{"lat": c.latitude, "lon": c.longitude} for c in result.outcome.route],
                latitude="lat",
                longitude="lon",
            )
            if result.record is None:
                st.caption("Run discarded, nothing saved.")

    if _store_mtime(store_path) == 0.0:
        st.info(f"No run store at {store_path!r} yet. Replay a route to create one.")
        return

    try:
        runs = _load_runs(store_path, user_id, _store_mtime(store_path))
    except Exception as exc:
        st.exception(exc)
        return

    try:
        tz = tzinfo_from_name(tz_name)
    except ValueError as exc:
        st.error(str(exc))
        return
    today = utc_now().date()
    st.subheader("History (newest first)")
    rows: list[dict[str, object]] = []
    for r in runs:
        m = RunMetrics(distance_m=r.distance_meters, elapsed_s=r.duration_sec)
        rows.append(
            {
                "date": parse_iso(r.date_iso).astimezone(tz).strftime("%Y-%m-%d %H:%M"),
                "distance_km": round(m.distance_km, 2),
                "time": m.time_text,
                "pace_per_km": m.pace_text,
                "id": r.id,
            }
        )
    st.dataframe(rows, use_container_width=True, height=360)

    st.subheader("Achievements")
    c1, c2 = st.columns(2)
    c1.metric("Day streak", str(current_streak(runs, today)))
    c2.metric("Longest streak (days)", str(longest_streak(runs, today)))
    for a in compute_achievements(runs, today):
        icon = "✅" if a.unlocked else "⬜"
        st.write(f"{icon} **{a.title}**: {a.description}")


if __name__ == "__main__":
    main()
