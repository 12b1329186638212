"""
Tests for the JSON run store (run_tracker/store.py).
"""

import json

from run_tracker.models import RunRecord
from run_tracker.store import JsonRunStore


def _record(i):
    return RunRecord(id=f"run-{i}", date_iso=f"2026-03-0{i}T07:00:00.000Z", distance_meters=1000.0 * i, duration_sec=300 * i)


class TestJsonRunStore:
    def test_prepend_keeps_newest_first_per_user(self, tmp_path):
        store = JsonRunStore(tmp_path / "runs.json")
        store.prepend("alice", _record(1))
        store.prepend("bob", _record(2))
        store.prepend("alice", _record(3))

        assert [r.id for r in store.list_runs("alice")] == ["run-3", "run-1"]
        assert [r.id for r in store.list_runs("bob")] == ["run-2"]
        assert store.list_runs("carol") == []
        assert store.users() == ["alice", "bob"]

    def test_flush_writes_snapshot_and_clears_journal(self, tmp_path):
        path = tmp_path / "runs.json"
        store = JsonRunStore(path)
        store.prepend("alice", _record(1))
        journal = tmp_path / "runs.journal.jsonl"
        assert journal.exists()

        store.flush()

        assert not journal.exists()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"alice": [_record(1).to_dict()]}
        assert JsonRunStore(path).list_runs("alice") == [_record(1)]

    def test_journal_is_replayed_after_crash(self, tmp_path):
        path = tmp_path / "runs.json"
        first = JsonRunStore(path)
        first.prepend("alice", _record(1))
        first.flush()
        first.prepend("alice", _record(2))
        # no flush: simulate a crash

        reopened = JsonRunStore(path)
        assert [r.id for r in reopened.list_runs("alice")] == ["run-2", "run-1"]

    def test_journal_entries_already_in_snapshot_are_not_duplicated(self, tmp_path):
        path = tmp_path / "runs.json"
        path.write_text(json.dumps({"alice": [_record(1).to_dict()]}), encoding="utf-8")
        journal = tmp_path / "runs.journal.jsonl"
        journal.write_text(
            json.dumps({"u": "alice", "r": _record(1).to_dict()}) + "\n" + "{broken\n",
            encoding="utf-8",
        )

        assert [r.id for r in JsonRunStore(path).list_runs("alice")] == ["run-1"]

    def test_corrupted_snapshot_is_moved_aside_without_overwriting(self, tmp_path):
        path = tmp_path / "runs.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonRunStore(path).list_runs("alice") == []
        assert not path.exists()

        path.write_text("[still not", encoding="utf-8")
        assert JsonRunStore(path).list_runs("alice") == []

        backups = sorted(p.read_text(encoding="utf-8") for p in tmp_path.glob("runs.json.broken-*"))
        assert backups == ["[still not", "{not json"]

    def test_record_with_unparseable_date_is_skipped(self, tmp_path):
        path = tmp_path / "runs.json"
        path.write_text(
            json.dumps(
                {
                    "alice": [
                        {"id": "bad", "dateISO": "yesterday", "distanceMeters": 1200, "durationSec": 400},
                        _record(1).to_dict(),
                    ]
                }
            ),
            encoding="utf-8",
        )

        assert JsonRunStore(path).list_runs("alice") == [_record(1)]

    def test_ensure_persistent_files_creates_but_never_clears(self, tmp_path):
        path = tmp_path / "nested" / "runs.json"
        journal = tmp_path / "nested" / "runs.journal.jsonl"
        store = JsonRunStore(path)

        store.ensure_persistent_files()
        assert path.read_text(encoding="utf-8") == "{}"
        assert journal.read_text(encoding="utf-8") == ""

        store.prepend("alice", _record(1))
        JsonRunStore(path).ensure_persistent_files()
        assert [r.id for r in JsonRunStore(path).list_runs("alice")] == ["run-1"]
