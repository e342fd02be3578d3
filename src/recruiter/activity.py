"""Activity recording for state-changing operations."""

from __future__ import annotations

import json
import threading
from collections import deque
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

import pendulum
import structlog

MAX_RECENT = 500


@runtime_checkable
class ActivityRecorder(Protocol):
    def record(self, kind: str, details: dict[str, Any]) -> None:
        """Report one event; must not raise."""


class ActivityLog:
    """Append-only activity log writing JSON lines.

    The newest ``max_entries`` entries are also kept in memory for
    ``recent``. The file is compacted back to that tail once it holds twice
    as many lines. Write failures are logged and never reach the caller.
    """

    def __init__(self, path: str | Path | None = None, *, max_entries: int = MAX_RECENT):
        self._path = Path(path) if path else None
        self._max_entries = max_entries
        self._entries: deque[dict[str, Any]] = deque(maxlen=max_entries)
        self._file_lines = 0
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._load_tail()

    def record(self, kind: str, details: dict[str, Any]) -> None:
        entry = {
            "id": uuid4().hex,
            "action": kind,
            "details": dict(details),
            "timestamp": pendulum.now("UTC").to_iso8601_string(),
        }
        with self._lock:
            self._entries.append(entry)
            if self._path is None:
                return
            try:
                with self._path.open("a", encoding="utf-8") as handle:
                    handle.write(_dumps(entry))
                    handle.write("\n")
                self._file_lines += 1
                if self._file_lines > 2 * self._max_entries:
                    self._compact()
            except OSError as exc:
                self._logger.warning("activity.write_failed", action=kind, error=str(exc))

    def recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return entries newest first."""
        with self._lock:
            entries = list(reversed(self._entries))
        return entries if limit is None else entries[: max(limit, 0)]

    def _compact(self) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(
            "".join(_dumps(entry) + "\n" for entry in self._entries),
            encoding="utf-8",
        )
        tmp_path.replace(self._path)
        self._logger.debug("activity.compacted", dropped=self._file_lines - len(self._entries))
        self._file_lines = len(self._entries)

    def _load_tail(self) -> None:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                self._file_lines += 1
                try:
                    self._entries.append(json.loads(raw))
                except json.JSONDecodeError:
                    self._logger.warning("activity.bad_line", path=str(self._path), line=idx)


def _dumps(entry: dict[str, Any]) -> str:
    return json.dumps(entry, ensure_ascii=False, default=str)


__all__ = ["ActivityRecorder", "ActivityLog", "MAX_RECENT"]
