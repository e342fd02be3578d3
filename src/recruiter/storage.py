"""Key-addressed record stores for candidates and roles."""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generic, Iterator, TypeVar

import structlog
from pydantic import BaseModel

from .errors import NotFound
from .schemas import Candidate, RoleProfile

T = TypeVar("T", bound=BaseModel)


class KeyedLocks:
    """Registry handing out one lock per record id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield

    def discard(self, key: str) -> None:
        with self._guard:
            self._locks.pop(key, None)


class JsonRecordStore(Generic[T]):
    """In-memory records mirrored to a JSON array file.

    ``update`` runs read, mutate and write for one id under that id's lock,
    so concurrent callers on the same record never lose each other's
    changes. Every mutation stages a new snapshot and swaps it in only after
    the file write succeeds, so a failed write leaves the store as it was.
    Without a ``path`` the store is memory-only.
    """

    kind = "record"
    model: type[T]

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._locks = KeyedLocks()
        self._io_lock = threading.RLock()
        self._records: dict[str, T] = {}
        self._logger = structlog.get_logger(__name__).bind(store=self.kind)
        self._load()

    @property
    def path(self) -> Path | None:
        return self._path

    def find(self, record_id: str) -> T | None:
        with self._io_lock:
            return self._records.get(record_id)

    def get(self, record_id: str) -> T:
        record = self.find(record_id)
        if record is None:
            raise NotFound(self.kind, record_id)
        return record

    def list_all(self) -> list[T]:
        with self._io_lock:
            return list(self._records.values())

    def add(self, record: T) -> T:
        record_id = self._id_of(record)
        with self._locks.hold(record_id), self._io_lock:
            if record_id in self._records:
                raise ValueError(f"{self.kind} already exists: {record_id!r}")
            self._commit({**self._records, record_id: record})
        return record

    def add_many(self, records: list[T]) -> list[T]:
        with self._io_lock:
            staged = dict(self._records)
            for record in records:
                record_id = self._id_of(record)
                if record_id in staged:
                    raise ValueError(f"{self.kind} already exists: {record_id!r}")
                staged[record_id] = record
            self._commit(staged)
        return records

    def update(self, record_id: str, mutator: Callable[[T], T]) -> T:
        with self._locks.hold(record_id):
            current = self.get(record_id)
            updated = mutator(current)
            if self._id_of(updated) != record_id:
                raise ValueError(f"{self.kind} id cannot change during update")
            if updated is current:
                return current
            with self._io_lock:
                if record_id not in self._records:
                    raise NotFound(self.kind, record_id)
                self._commit({**self._records, record_id: updated})
            return updated

    def delete(self, record_id: str) -> bool:
        with self._locks.hold(record_id), self._io_lock:
            if record_id not in self._records:
                return False
            staged = dict(self._records)
            del staged[record_id]
            self._commit(staged)
        self._locks.discard(record_id)
        return True

    @staticmethod
    def _id_of(record: T) -> str:
        return getattr(record, "id")

    def _load(self) -> None:
        if self._path is None or not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid {self.kind} store {self._path}: {exc}") from exc
        if not isinstance(data, list):
            raise ValueError(f"{self.kind} store {self._path} must hold a JSON array")
        for raw in data:
            record = self.model.model_validate(raw)
            self._records[self._id_of(record)] = record
        self._logger.debug("store.loaded", path=str(self._path), count=len(self._records))

    def _commit(self, records: dict[str, T]) -> None:
        """Persist ``records`` and only then make them the live snapshot."""
        if self._path is not None:
            self._write(records)
        self._records = records

    def _write(self, records: dict[str, T]) -> None:
        payload = [record.model_dump(mode="json", by_alias=True) for record in records.values()]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp_path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            tmp_path.replace(self._path)
        except OSError as exc:
            self._logger.error("store.write_failed", path=str(self._path), error=str(exc))
            tmp_path.unlink(missing_ok=True)
            raise


class CandidateStore(JsonRecordStore[Candidate]):
    kind = "candidate"
    model = Candidate


class RoleStore(JsonRecordStore[RoleProfile]):
    kind = "role"
    model = RoleProfile


__all__ = ["CandidateStore", "RoleStore", "JsonRecordStore", "KeyedLocks"]
