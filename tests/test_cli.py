"""
End-to-end tests for the command-line interface (run_tracker/cli.py).
"""

import json

from run_tracker.cli import main

from conftest import ORIGIN, north_of

T0 = 1_750_000_000_000


def _write_route(path, n, step_m=10.0):
    lines = ["geoTime,latitude,longitude"]
    for i in range(n):
        c = north_of(ORIGIN, step_m * i)
        lines.append(f"{T0 + 2000 * i},{c.latitude!r},{c.longitude!r}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_replay_then_list_runs(tmp_path, capsys):
    route = tmp_path / "route.csv"
    store = tmp_path / "runs.json"
    summary = tmp_path / "summary.json"
    _write_route(route, 151)

    rc = main(
        [
            "replay",
            "--csv", str(route),
            "--store", str(store),
            "--user", "alice",
            "--summary-out", str(summary),
            "--weight-kg", "70",
        ]
    )
    out = capsys.readouterr().out
    assert rc == 0
    assert "Distance: 1.50 km" in out
    assert "Time: 00:05:00" in out
    assert "Pace: 03:20 /km" in out
    assert "Calories:" in out

    payload = json.loads(summary.read_text(encoding="utf-8"))
    assert payload["durationSec"] == 300
    assert len(payload["coords"]) == 151
    assert payload["region"]["latitude"] > ORIGIN.latitude

    rc = main(["runs", "--store", str(store), "--user", "alice", "--display-name", "Alice"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "### Runs for Alice (1)" in out
    assert "1.50 km" in out

    rc = main(["runs", "--store", str(store), "--user", "alice", "--json"])
    records = json.loads(capsys.readouterr().out)
    assert records[0]["durationSec"] == 300

    rc = main(["runs", "--store", str(store), "--user", "bob"])
    out = capsys.readouterr().out
    assert "### Runs for bob (0)" in out
    assert "known users: alice" in out


def test_short_replay_is_rejected(tmp_path, capsys):
    route = tmp_path / "route.csv"
    store = tmp_path / "runs.json"
    _write_route(route, 2, step_m=4.0)

    rc = main(["replay", "--csv", str(route), "--store", str(store)])

    assert rc == 1
    assert "Run too short" in capsys.readouterr().out
    assert json.loads(store.read_text(encoding="utf-8")) == {}
    assert (tmp_path / "runs.journal.jsonl").read_text(encoding="utf-8") == ""


def test_achievements_command(tmp_path, capsys):
    store = tmp_path / "runs.json"
    store.write_text(
        json.dumps(
            {
                "alice": [
                    {"id": "b", "dateISO": "2026-05-09T07:00:00.000Z", "distanceMeters": 6000, "durationSec": 1800},
                    {"id": "a", "dateISO": "2026-05-08T07:00:00.000Z", "distanceMeters": 5000, "durationSec": 1700},
                ]
            }
        ),
        encoding="utf-8",
    )

    rc = main(["achievements", "--store", str(store), "--user", "alice", "--today", "2026-05-09"])
    out = capsys.readouterr().out

    assert rc == 0
    assert "Day streak: 2 day(s)" in out
    assert "Longest streak: 2 day(s)" in out
    assert "[x] First 5K" in out
    assert "[x] 10K Total" in out
    assert "[ ] 3-Day Streak" in out


def test_pace_command(capsys):
    assert main(["pace", "--distance-m", "1500", "--duration-s", "600"]) == 0
    assert "Pace: 06:40 /km" in capsys.readouterr().out

    assert main(["pace", "--distance-m", "0", "--duration-s", "60"]) == 0
    assert "Pace: --:-- /km" in capsys.readouterr().out


def test_stored_run_with_bad_date_is_skipped(tmp_path, capsys):
    store = tmp_path / "runs.json"
    store.write_text(
        json.dumps(
            {
                "alice": [
                    {"id": "bad", "dateISO": "yesterday", "distanceMeters": 3000, "durationSec": 900},
                    {"id": "good", "dateISO": "2026-05-09T07:00:00.000Z", "distanceMeters": 6000, "durationSec": 1800},
                ]
            }
        ),
        encoding="utf-8",
    )

    assert main(["runs", "--store", str(store), "--user", "alice"]) == 0
    out = capsys.readouterr().out
    assert "### Runs for alice (1)" in out
    assert "[good]" in out
    assert "[bad]" not in out

    assert main(["achievements", "--store", str(store), "--user", "alice", "--today", "2026-05-09"]) == 0
    assert "[x] First 5K" in capsys.readouterr().out


def test_unknown_timezone_is_a_usage_error(tmp_path, capsys):
    route = tmp_path / "route.csv"
    store = tmp_path / "runs.json"
    _write_route(route, 20)

    assert main(["replay", "--csv", str(route), "--store", str(store), "--tz", "Mars/Olympus_Mons"]) == 1
    assert "invalid timezone" in capsys.readouterr().err
    assert not store.exists()

    assert main(["runs", "--store", str(store), "--tz", "Mars/Olympus_Mons"]) == 1
    assert "invalid timezone" in capsys.readouterr().err
