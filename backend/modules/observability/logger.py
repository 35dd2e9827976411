"""
modules/observability/logger.py
--------------------------------
Plan event log: one JSON object per line, one file per session id.

    event_log = StructuredLogger()
    event_log.log("plan_3f9c", "PLAN_GENERATED", {"stops": 4})
    event_log.read_events("plan_3f9c", {"PLAN_GENERATED"})

Files live in config.LOGS_DIR.  With PLAN_EVENT_LOG_ENABLED=false every
call is a no-op; the planner's output never depends on this log.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Iterable, Optional

import config


class StructuredLogger:
    """Append-only JSONL event log; writers share one lock."""

    def __init__(self, logs_dir: Path | str | None = None, enabled: bool | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir else config.LOGS_DIR
        self.enabled = config.PLAN_EVENT_LOG_ENABLED if enabled is None else enabled
        self._lock = threading.Lock()
        self._files: dict[str, IO[str]] = {}

    # ── Writing ───────────────────────────────────────────────────────────────

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        if not self.enabled:
            return
        line = json.dumps(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "session_id": session_id,
                "event_type": event_type,
                "payload": payload,
            },
            default=str,
            ensure_ascii=False,
        )
        with self._lock:
            fh = self._files.get(session_id) or self._open(session_id)
            fh.write(line + "\n")
            fh.flush()

    def close(self, session_id: str | None = None) -> None:
        """Close one session file, or all of them."""
        with self._lock:
            ids = [session_id] if session_id else list(self._files)
            for sid in ids:
                fh = self._files.pop(sid, None)
                if fh is not None:
                    fh.close()

    # ── Reading ───────────────────────────────────────────────────────────────

    def path_for(self, session_id: str) -> Path:
        return self.logs_dir / f"{session_id}.jsonl"

    def read_events(self, session_id: str, event_types: Optional[Iterable[str]] = None) -> list[dict]:
        """Recorded events for a session in write order, optionally filtered by type."""
        wanted = set(event_types) if event_types is not None else None
        path = self.path_for(session_id)
        if not path.exists():
            return []

        records: list[dict] = []
        with open(path, "r", encoding="utf-8") as fh:
            for raw in fh:
                raw = raw.strip()
                if not raw:
                    continue
                record = json.loads(raw)
                if wanted is None or record.get("event_type") in wanted:
                    records.append(record)
        return records

    def _open(self, session_id: str) -> IO[str]:
        os.makedirs(self.logs_dir, exist_ok=True)
        fh = open(self.path_for(session_id), "a", encoding="utf-8")  # noqa: SIM115
        self._files[session_id] = fh
        return fh
