from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Europe/Vienna"
METERS_PER_DEG_LAT: Final[float] = 111_195.0


@dataclass(frozen=True, slots=True)
class Loop:
    name: str
    lat: float
    lon: float
    radius_m: float


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_points(
    *,
    seconds: int,
    seed: int,
    start_local: datetime,
    loop: Loop,
    pace_s_per_km: float,
    pause_at_s: int | None,
    pause_s: int,
) -> list[dict[str, str]]:
    """Generate a fake jog around a circular loop, one fix every 1-3 seconds."""

    rng = random.Random(seed)
    tz = ZoneInfo(TZ)
    t_ms = _epoch_ms(start_local.replace(tzinfo=tz))

    speed_mps = 1000.0 / pace_s_per_km
    circumference = 2 * math.pi * loop.radius_m
    meters_per_deg_lon = METERS_PER_DEG_LAT * math.cos(math.radians(loop.lat))

    out: list[dict[str, str]] = []
    travelled = 0.0
    elapsed = 0
    paused = False
    while elapsed <= seconds:
        angle = 2 * math.pi * (travelled / circumference)
        # Small GPS jitter (~1 m)
        north = loop.radius_m * math.sin(angle) + rng.uniform(-1.0, 1.0)
        east = loop.radius_m * math.cos(angle) + rng.uniform(-1.0, 1.0)
        out.append(
            {
                "geoTime": str(t_ms),
                "latitude": f"{loop.lat + north / METERS_PER_DEG_LAT:.7f}",
                "longitude": f"{loop.lon + east / meters_per_deg_lon:.7f}",
            }
        )

        step = rng.randint(1, 3)
        if pause_at_s is not None and not paused and elapsed >= pause_at_s:
            # Standing still at a traffic light: no fixes, the clock keeps going
            paused = True
            t_ms += pause_s * 1000
        t_ms += step * 1000
        elapsed += step
        travelled += speed_mps * step * rng.uniform(0.9, 1.1)

    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake route CSV for replay demos and tests.")
    p.add_argument("--out", type=str, default="sample_data/route.csv", help="Output CSV path")
    p.add_argument("--seconds", type=int, default=1200, help="Running time to simulate")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--pace", type=float, default=360.0, help="Target pace in seconds per km")
    p.add_argument("--pause-at", type=int, default=None, help="Insert a pause after this many seconds")
    p.add_argument("--pause-seconds", type=int, default=120, help="Length of the inserted pause")
    p.add_argument(
        "--start",
        type=str,
        default="2025-06-01 07:30:00",
        help="Start local time in Europe/Vienna, e.g. '2025-06-01 07:30:00'",
    )
    args = p.parse_args()

    rows = generate_points(
        seconds=args.seconds,
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        loop=Loop("prater_loop", 48.2082000, 16.3738000, 400.0),
        pace_s_per_km=args.pace,
        pause_at_s=args.pause_at,
        pause_s=args.pause_seconds,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["geoTime", "latitude", "longitude"])
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
