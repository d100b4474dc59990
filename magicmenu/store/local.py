"""
Local Record Store — named JSON collections used for demo mode.

Each collection (restaurants, categories, menu_items, reviews, users) is a
JSON array stored under a string key ("demo_restaurants", ...). Where the
bytes live is decided by an injected backend:

  MemoryBackend  — dict in process memory (tests, throwaway demos)
  FileBackend    — one <key>.json file per collection (persistent demo data)

Whole-collection primitives (read / write / append) mirror the demo data
format exactly. Per-record primitives (get / upsert / patch / remove) run
under a single re-entrant lock so a read-modify-write cannot interleave with
another writer in the same process. Separate processes sharing one
FileBackend directory are still last-writer-wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol

from magicmenu.utils.demo_data import COLLECTION_KEYS

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class StorageBackend(Protocol):
    """Raw key → text persistence surface."""

    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, payload: str) -> None: ...

    def drop(self, key: str) -> None: ...


class MemoryBackend:
    """Keeps serialized collections in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, payload: str) -> None:
        self._data[key] = payload

    def drop(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """Stores each collection as <directory>/<key>.json, replaced atomically."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def save(self, key: str, payload: str) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def drop(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class LocalRecordStore:
    """Collection-level and record-level access to the demo data."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self._lock = threading.RLock()

    @staticmethod
    def key_for(collection: str) -> str:
        """Map a collection name to its storage key; unknown names raise KeyError."""
        return COLLECTION_KEYS[collection]

    # ── Whole-collection primitives ──────────────────────────────────────────

    def read(self, collection: str) -> list[Record]:
        """
        Return every record of a collection.
        Absent keys, unparsable JSON and non-array payloads all read as [].
        """
        try:
            raw = self.backend.load(self.key_for(collection))
        except (KeyError, OSError) as exc:
            logger.warning("Local store read of %s failed: %s", collection, exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Local store key for %s holds invalid JSON; treating as empty", collection)
            return []
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict)]

    def write(self, collection: str, records: list[Record]) -> None:
        """Serialize and overwrite the whole collection."""
        payload = json.dumps(records, default=str)
        with self._lock:
            self.backend.save(self.key_for(collection), payload)

    def append(self, collection: str, record: Record) -> Record:
        """Read-all, add one record, write-all."""
        with self._lock:
            records = self.read(collection)
            records.append(record)
            self.write(collection, records)
        return record

    def clear(self, collection: Optional[str] = None) -> None:
        """Drop one collection, or all of them."""
        names = [collection] if collection else list(COLLECTION_KEYS)
        with self._lock:
            for name in names:
                self.backend.drop(self.key_for(name))

    # ── Record-level primitives ──────────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator["LocalRecordStore"]:
        """Hold the writer lock across several calls."""
        with self._lock:
            yield self

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        for record in self.read(collection):
            if record.get("id") == record_id:
                return record
        return None

    def upsert(self, collection: str, record: Record) -> Record:
        """Replace the record with the same id, or append it."""
        with self._lock:
            records = self.read(collection)
            for i, existing in enumerate(records):
                if existing.get("id") == record.get("id"):
                    records[i] = record
                    break
            else:
                records.append(record)
            self.write(collection, records)
        return record

    def patch(self, collection: str, record_id: str, changes: Record) -> Optional[Record]:
        """Shallow-merge changes into one record. Returns None if it is absent."""
        with self._lock:
            records = self.read(collection)
            for i, existing in enumerate(records):
                if existing.get("id") == record_id:
                    records[i] = {**existing, **changes, "id": record_id}
                    self.write(collection, records)
                    return records[i]
        return None

    def remove(self, collection: str, record_id: str) -> bool:
        """Delete one record by id. Related records are left untouched."""
        with self._lock:
            records = self.read(collection)
            kept = [r for r in records if r.get("id") != record_id]
            if len(kept) == len(records):
                return False
            self.write(collection, kept)
        return True


def build_local_store(backend: str, path: str) -> LocalRecordStore:
    """Construct the store named by the LOCAL_STORE_BACKEND setting."""
    if backend == "memory":
        return LocalRecordStore(MemoryBackend())
    return LocalRecordStore(FileBackend(path))
