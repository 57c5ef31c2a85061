from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Union

from .exceptions import CacheReadError
from .models import CacheEntry, NewsRecord

logger = logging.getLogger(__name__)

# The version suffix is part of the key: entries written in an older format
# live under another key and are never read back.
CACHE_KEY = "latestNews_cache_v3"
CACHE_TTL_SEC = 60 * 60


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:  # pragma: no cover - interface
        ...

    def set(self, key: str, value: str) -> None:  # pragma: no cover - interface
        ...


class MemoryStore:
    """Process-local string store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """
    String store persisted as one JSON object on disk.

    Survives process restarts. There is no locking; a single writer at a
    time is assumed.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            # Unreadable file: start over rather than refusing every write.
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class CacheStore:
    """
    Time-bounded cache of the relevant record list in one key-value slot.

    ``load`` and ``save`` never raise: every read failure degrades to a miss
    and write failures are only logged.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = CACHE_KEY,
        ttl: float = CACHE_TTL_SEC,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.key = key
        self.ttl = ttl
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def read_entry(self) -> Optional[CacheEntry]:
        """Decode the slot regardless of age. Raises CacheReadError if it is corrupt."""
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            raise CacheReadError(f"cannot read cache slot {self.key!r} ({e})") from e
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CacheReadError(f"cache slot {self.key!r} is not valid JSON") from e
        return CacheEntry.from_dict(data)

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self._now_ms() - entry.written_at <= self.ttl * 1000

    def load(self) -> Optional[List[NewsRecord]]:
        try:
            entry = self.read_entry()
        except CacheReadError as e:
            logger.warning("Ignoring unreadable cache: %s", e)
            return None
        if entry is None:
            logger.debug("Cache miss: slot %r is empty", self.key)
            return None
        if not self.is_fresh(entry):
            logger.debug("Cache miss: entry is %.0fs old", (self._now_ms() - entry.written_at) / 1000)
            return None
        logger.debug("Cache hit: %d records", len(entry.records))
        return list(entry.records)

    def save(self, records: Sequence[NewsRecord]) -> None:
        entry = CacheEntry(written_at=self._now_ms(), records=tuple(records))
        try:
            self.store.set(self.key, json.dumps(entry.to_dict(), ensure_ascii=False))
        except Exception:
            logger.warning("Failed to write cache slot %r", self.key, exc_info=True)
