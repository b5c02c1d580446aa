"""metadata.core.repo
Domain-level repository for the watched list.

All persistence lives here; the GUI layer imports this module instead of
touching `LocalStorage` directly.
"""

from __future__ import annotations
import json
import sqlite3
import threading
from typing import Iterator, List, Optional

from movieWatch.metadata.core.models import WatchedRecord, WatchedSummary
from movieWatch.metadata.movie_watch_db import LocalStorage
from movieWatch.settings import WATCHED_KEY
from movieWatch.utils import log_debug


class WatchedListStore:
    """Ordered, id-unique list of watched movies, persisted on every mutation."""

    def __init__(self, storage: LocalStorage, key: str = WATCHED_KEY):
        self._storage = storage
        self._key = key
        self._lock = threading.RLock()
        self._records: List[WatchedRecord] = []
        self._loaded = False

    # ───────────────────────────── loading ───────────────────────────
    def load_initial(self) -> None:
        """Seed the in-memory list from storage (once per process).

        Missing or corrupt data yields an empty list; nothing is raised.
        """
        with self._lock:
            if self._loaded:
                log_debug("watched list already loaded; ignoring second load")
                return
            self._loaded = True
            self._records = self._read()
            log_debug(f"watched list loaded ({len(self._records)} records)")

    def _read(self) -> List[WatchedRecord]:
        try:
            raw = self._storage.get(self._key)
        except (sqlite3.Error, OSError) as exc:
            log_debug(f"watched list unreadable: {exc}")
            return []
        if raw is None:
            return []

        try:
            rows = json.loads(raw)
            if not isinstance(rows, list):
                raise TypeError(f"expected a JSON list, got {type(rows).__name__}")
            records = [WatchedRecord.from_json(row) for row in rows]
        except (ValueError, TypeError, KeyError, AttributeError,
                OverflowError, RecursionError) as exc:
            log_debug(f"watched list corrupt, starting empty: {exc!r}")
            return []

        # first occurrence wins if older data carries duplicates
        seen: set[str] = set()
        unique = []
        for rec in records:
            if rec.imdb_id not in seen:
                seen.add(rec.imdb_id)
                unique.append(rec)
        return unique

    # ───────────────────────────── writers ──────────────────────────
    def add(self, record: WatchedRecord) -> bool:
        """Append *record* and persist.

        Returns **False** (list untouched) if its imdb_id is already watched.
        """
        with self._lock:
            if self._index(record.imdb_id) is not None:
                log_debug(f"rejected duplicate watched record {record.imdb_id}")
                return False
            self._records.append(record)
            self._persist()
            return True

    def remove(self, imdb_id: str) -> None:
        """Drop the record with *imdb_id*; absent ids are a no-op."""
        with self._lock:
            idx = self._index(imdb_id)
            if idx is None:
                return
            del self._records[idx]
            self._persist()

    def _persist(self) -> None:
        payload = json.dumps([r.to_json() for r in self._records])
        try:
            self._storage.set(self._key, payload)
        except (sqlite3.Error, OSError) as exc:
            log_debug(f"watched list write failed: {exc}")

    # ───────────────────────────── look-ups ──────────────────────────
    def _index(self, imdb_id: str) -> Optional[int]:
        for i, rec in enumerate(self._records):
            if rec.imdb_id == imdb_id:
                return i
        return None

    @property
    def records(self) -> tuple[WatchedRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def get(self, imdb_id: str) -> Optional[WatchedRecord]:
        with self._lock:
            idx = self._index(imdb_id)
            return None if idx is None else self._records[idx]

    def summary(self) -> WatchedSummary:
        return WatchedSummary.of(self.records)

    def __contains__(self, imdb_id: object) -> bool:
        return isinstance(imdb_id, str) and self.get(imdb_id) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WatchedRecord]:
        return iter(self.records)
