"""Per-user run history persisted as JSON on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from run_tracker.models import RunRecord
from run_tracker.timeutils import utc_now

logger = logging.getLogger(__name__)


class RunStore(Protocol):
    """Append-only, newest-first run collection keyed by user."""

    def prepend(self, user_id: str, record: RunRecord) -> None: ...

    def list_runs(self, user_id: str) -> list[RunRecord]: ...


class JsonRunStore:
    """A small JSON store (user_id -> runs, newest first).

    Every ``prepend`` is appended to a write-ahead journal right away, so a crash
    between two ``flush`` calls loses nothing.
    Example: runs.json -> runs.journal.jsonl
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._journal_path = self._path.with_name(f"{self._path.stem}.journal.jsonl")
        self._data: dict[str, list[dict[str, Any]]] = {}
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    def ensure_persistent_files(self) -> None:
        """Create the snapshot and journal files if missing.

        Lets a long replay show its artifacts right away. Existing content is
        never cleared.
        """

        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("{}", encoding="utf-8")
        if not self._journal_path.exists():
            self._journal_path.parent.mkdir(parents=True, exist_ok=True)
            self._journal_path.write_text("", encoding="utf-8")

    def load(self) -> None:
        """Load snapshot and replay the journal (no-op if already loaded)."""

        if self._loaded:
            return
        self._data = {}
        if self._path.exists():
            text = self._path.read_text(encoding="utf-8").strip()
            if text:
                try:
                    raw = json.loads(text)
                except json.JSONDecodeError:
                    # Snapshot corrupted: move it aside and start fresh
                    backup = self._backup_path()
                    self._path.replace(backup)
                    logger.warning("run store %s is corrupted, moved to %s", self._path, backup)
                    raw = {}
                if isinstance(raw, dict):
                    self._data = {
                        str(k): [r for r in v if isinstance(r, dict)] for k, v in raw.items() if isinstance(v, list)
                    }

        self._replay_journal()
        self._loaded = True

    def prepend(self, user_id: str, record: RunRecord) -> None:
        """Add a run at the head of the user's collection."""

        self.load()
        payload = record.to_dict()
        self._data.setdefault(user_id, []).insert(0, payload)
        self._append_journal(user_id, payload)
        logger.info("saved run %s for user %s (%.1f m)", record.id, user_id, record.distance_meters)

    def list_runs(self, user_id: str) -> list[RunRecord]:
        """Return the user's runs, newest first."""

        self.load()
        out: list[RunRecord] = []
        for raw in self._data.get(user_id, []):
            try:
                out.append(RunRecord.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("skipping malformed run record for user %s: %r", user_id, raw)
        return out

    def users(self) -> list[str]:
        self.load()
        return sorted(self._data)

    def flush(self) -> None:
        """Persist a full snapshot (atomic-ish) and clear the journal."""

        self.load()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)
        self._clear_journal()

    def _backup_path(self) -> Path:
        """Unused ``<name>.broken-<utc stamp>[-n]`` path next to the snapshot."""

        stamp = utc_now().strftime("%Y%m%dT%H%M%S%f")
        base = self._path.with_name(f"{self._path.name}.broken-{stamp}")
        candidate = base
        n = 1
        while candidate.exists():
            candidate = base.with_name(f"{base.name}-{n}")
            n += 1
        return candidate

    def _append_journal(self, user_id: str, payload: dict[str, Any]) -> None:
        self._journal_path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps({"u": user_id, "r": payload}, ensure_ascii=False)
        with self._journal_path.open("a", encoding="utf-8", newline="\n") as f:
            f.write(line + "\n")

    def _replay_journal(self) -> None:
        """Apply journal entries in order, skipping ids already in the snapshot."""

        if not self._journal_path.exists():
            return
        try:
            with self._journal_path.open("r", encoding="utf-8") as f:
                for line in f:
                    s = line.strip()
                    if not s:
                        continue
                    try:
                        rec = json.loads(s)
                    except json.JSONDecodeError:
                        # ignore broken tail lines
                        continue
                    user_id = rec.get("u")
                    payload = rec.get("r")
                    if not isinstance(user_id, str) or not isinstance(payload, dict):
                        continue
                    runs = self._data.setdefault(user_id, [])
                    if any(r.get("id") == payload.get("id") for r in runs):
                        continue
                    runs.insert(0, payload)
        except OSError as exc:
            logger.warning("cannot read run journal %s: %s", self._journal_path, exc)

    def _clear_journal(self) -> None:
        try:
            if self._journal_path.exists():
                self._journal_path.unlink()
        except OSError as exc:
            logger.warning("cannot clear run journal %s: %s", self._journal_path, exc)
