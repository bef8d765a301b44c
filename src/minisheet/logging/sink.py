"""Append-only NDJSON event log for a sheet session.

Every event is one JSON line in ``<log_dir>/events.ndjson``, written with
sorted keys.  Appends hold an exclusive ``fcntl.flock`` and reads a shared
one, so several processes may share a log directory.  Where ``fcntl`` is
unavailable (Windows) the file is used unlocked.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from minisheet.logging.events import SheetEvent

try:
    import fcntl
except ImportError:
    fcntl = None  # type: ignore[assignment]

EVENTS_FILE = "events.ndjson"
MAX_READ_EVENTS = 2000

# Only this many trailing bytes of the log are scanned by read_events
_DEFAULT_TAIL_BYTES = 2 * 1024 * 1024


class EventSink:
    """Writes SheetEvents to, and reads them back from, one NDJSON file."""

    def __init__(self, log_dir: Path, *, fsync: bool = False, tail_bytes: int | None = None) -> None:
        self.log_dir = log_dir
        self.path = log_dir / EVENTS_FILE
        self._fsync = fsync
        self._tail_bytes = tail_bytes if tail_bytes is not None else _DEFAULT_TAIL_BYTES
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, event: SheetEvent) -> None:
        """Append *event* as one line."""
        line = json.dumps(event.model_dump(mode="json"), sort_keys=True, default=str) + "\n"
        with open(self.path, "a", encoding="utf-8") as f:
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            f.write(line)
            f.flush()
            if self._fsync:
                os.fsync(f.fileno())

    def read_events(
        self,
        *,
        level: str | None = None,
        event_type: str | None = None,
        limit: int = 200,
    ) -> list[dict[str, Any]]:
        """Recent events, newest first, optionally filtered by level and type.

        Lines that are not valid JSON are skipped.
        """
        if not self.path.exists():
            return []

        matched: list[dict[str, Any]] = []
        for line in self._recent_lines():
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if level and event.get("level") != level:
                continue
            if event_type and event.get("event_type") != event_type:
                continue
            matched.append(event)

        matched.reverse()
        return matched[: min(limit, MAX_READ_EVENTS)]

    def _recent_lines(self) -> list[str]:
        """Lines in the last ``tail_bytes`` of the log.  A line cut by the window is dropped."""
        with open(self.path, "rb") as f:
            if fcntl is not None:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            size = os.fstat(f.fileno()).st_size
            start = max(0, size - self._tail_bytes)
            f.seek(start)
            data = f.read()
        lines = data.decode("utf-8", errors="replace").splitlines()
        return lines[1:] if start else lines
