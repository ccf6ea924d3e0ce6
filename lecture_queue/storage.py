"""Video record storage.

Records are stored as plain JSON-compatible dicts keyed by their "id", so
that fields added by clients (folders, watched flags) survive import and
merge untouched.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .dates import to_iso
from .errors import StorageError

log = logging.getLogger(__name__)

Record = dict[str, Any]

DEFAULT_STORE = Path("videos-storage.json")


def is_valid_item(item: Any) -> bool:
    """Importable items need a string id and a string url."""
    return (
        isinstance(item, dict)
        and isinstance(item.get("id"), str)
        and isinstance(item.get("url"), str)
    )


class VideoRepository(ABC):
    """Storage contract for video records, keyed by id."""

    @abstractmethod
    def find_all(self) -> list[Record]:
        """All records, in insertion order."""

    @abstractmethod
    def upsert_replace(self, record: Record) -> None:
        """Drop any record with the same id, then append this one."""

    @abstractmethod
    def delete_by_id(self, video_id: str) -> bool:
        """Remove a record. Returns False if there was nothing to remove."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every record."""

    @abstractmethod
    def replace_all(self, records: list[Record]) -> None:
        """Make the collection exactly these records."""

    @abstractmethod
    def upsert_merge(self, record: Record) -> None:
        """Overwrite the fields of the record with the same id, or add it."""

    def describe(self) -> dict[str, Any]:
        """Backend details for the debug endpoint."""
        return {"storage": type(self).__name__}


class MemoryRepository(VideoRepository):
    """Records held in process memory.

    Mutators build the next state aside and hand it to _commit, so a
    subclass that persists can refuse a change without leaving it half
    applied.
    """

    def __init__(self, records: list[Record] | None = None):
        self._lock = threading.RLock()
        self._records: dict[str, Record] = {}
        for record in records or []:
            self._records[record["id"]] = dict(record)

    def find_all(self) -> list[Record]:
        with self._lock:
            return [dict(r) for r in self._records.values()]

    def upsert_replace(self, record: Record) -> None:
        with self._lock:
            records = dict(self._records)
            records.pop(record["id"], None)
            records[record["id"]] = dict(record)
            self._commit(records)

    def delete_by_id(self, video_id: str) -> bool:
        with self._lock:
            if video_id not in self._records:
                return False
            records = dict(self._records)
            del records[video_id]
            self._commit(records)
            return True

    def delete_all(self) -> None:
        with self._lock:
            self._commit({})

    def replace_all(self, records: list[Record]) -> None:
        with self._lock:
            self._commit({r["id"]: dict(r) for r in records})

    def upsert_merge(self, record: Record) -> None:
        with self._lock:
            records = dict(self._records)
            merged = dict(records.get(record["id"], {}))
            merged.update(record)
            records[record["id"]] = merged
            self._commit(records)

    def _commit(self, records: dict[str, Record]) -> None:
        """Install the new state. Called with the lock held."""
        self._records = records


class JsonFileRepository(MemoryRepository):
    """In-memory records snapshotted to a JSON file after every change.

    File layout: {"videos": [...], "lastUpdated": "<iso timestamp>"}
    """

    def __init__(self, path: Path | str = DEFAULT_STORE):
        self.path = Path(path)
        super().__init__(self._load())
        log.info("Loaded %d videos from %s", len(self._records), self.path)

    def _load(self) -> list[Record]:
        if not self.path.is_file():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.error("Could not read %s, starting empty: %s", self.path, e)
            return []
        videos = data.get("videos") if isinstance(data, dict) else None
        return [v for v in videos or [] if is_valid_item(v)]

    def _commit(self, records: dict[str, Record]) -> None:
        # memory changes only once the snapshot is on disk
        payload = {
            "videos": list(records.values()),
            "lastUpdated": to_iso(datetime.now(timezone.utc)),
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        log.debug("Saved %d videos to %s", len(records), self.path)
        super()._commit(records)

    def describe(self) -> dict[str, Any]:
        return {
            "storage": type(self).__name__,
            "storageFile": str(self.path),
            "fileExists": self.path.is_file(),
        }
