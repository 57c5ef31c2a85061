from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .exceptions import CacheReadError
from .textutil import parse_iso_instant, to_iso_instant, today_iso_date

DEFAULT_START_DATE = "2021-01-01"


@dataclass(frozen=True)
class NewsRecord:
    """
    A normalized, fully-valid news item.

    WARNING: ``to_dict`` is the persisted cache shape. Changing it requires
    bumping the cache key version.
    """
    id: str
    title: str
    url: str
    source: str
    published_at: datetime
    snippet: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "publishedAtISO": to_iso_instant(self.published_at),
            "snippet": self.snippet,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsRecord":
        if not isinstance(data, dict):
            raise ValueError("NewsRecord payload must be an object")
        title = data.get("title")
        url = data.get("url")
        published_at = parse_iso_instant(data.get("publishedAtISO"))
        if not isinstance(title, str) or not title:
            raise ValueError("NewsRecord lacks a title")
        if not isinstance(url, str) or not url:
            raise ValueError("NewsRecord lacks a url")
        if published_at is None:
            raise ValueError("NewsRecord lacks a valid publishedAtISO")
        return cls(
            id=str(data.get("id") or ""),
            title=title,
            url=url,
            source=str(data.get("source") or ""),
            published_at=published_at,
            snippet=str(data.get("snippet") or ""),
        )


@dataclass(frozen=True)
class CacheEntry:
    written_at: int  # epoch milliseconds
    records: Tuple[NewsRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"ts": self.written_at, "items": [r.to_dict() for r in self.records]}

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry":
        if not isinstance(data, dict):
            raise CacheReadError("cache entry is not an object")
        ts = data.get("ts")
        items = data.get("items")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            raise CacheReadError("cache entry has no numeric timestamp")
        if not math.isfinite(ts):
            raise CacheReadError(f"cache entry timestamp is not finite: {ts!r}")
        if not isinstance(items, list):
            raise CacheReadError("cache entry has no item list")
        try:
            records = tuple(NewsRecord.from_dict(i) for i in items)
        except ValueError as e:
            raise CacheReadError(f"cache entry holds an invalid record ({e})") from e
        return cls(written_at=int(ts), records=records)


@dataclass(frozen=True)
class DateRange:
    """Calendar date range (``YYYY-MM-DD``) interpreted in UTC, both ends inclusive."""
    start: str
    end: str

    @classmethod
    def default(cls, now: Optional[datetime] = None) -> "DateRange":
        return cls(start=DEFAULT_START_DATE, end=today_iso_date(now))

    def bounds(self) -> Optional[Tuple[datetime, datetime]]:
        """Return ``(start 00:00:00Z, end 23:59:59Z)`` or None if a date does not parse."""
        try:
            start = datetime.strptime(self.start, "%Y-%m-%d").date()
            end = datetime.strptime(self.end, "%Y-%m-%d").date()
        except (TypeError, ValueError):
            return None
        return (
            datetime.combine(start, time(0, 0, 0), tzinfo=timezone.utc),
            datetime.combine(end, time(23, 59, 59), tzinfo=timezone.utc),
        )

    def contains(self, dt: datetime) -> bool:
        b = self.bounds()
        if b is None:
            return False
        return b[0] <= dt <= b[1]


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"

