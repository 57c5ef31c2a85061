from __future__ import annotations

import calendar
import io
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser
from feedparser.datetimes import _parse_date

from .exceptions import ParseError

DEFAULT_SOURCE = "Google News"


def _from_struct(val: Any) -> Optional[datetime]:
    # feedparser normalizes *_parsed values to UTC
    if not isinstance(val, time.struct_time):
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return None


def _to_datetime(entry: Dict[str, Any]) -> Optional[datetime]:
    """
    Convert feed entry date fields to timezone-aware UTC datetime.
    Priority: published_parsed -> updated_parsed -> string fields -> None.
    """
    # "in" first: reading a missing updated* key makes feedparser warn and
    # hand back the published value
    for key in ("published_parsed", "updated_parsed"):
        if key not in entry:
            continue
        dt = _from_struct(entry[key])
        if dt is not None:
            return dt
    for key in ("published", "updated"):
        if key not in entry:
            continue
        s = entry[key]
        if isinstance(s, str) and s.strip():
            dt = _from_struct(_parse_date(s))
            if dt is not None:
                return dt
    return None


def _get_source(entry: Dict[str, Any]) -> str:
    # Google News puts the publisher in <source url="...">Name</source>
    src = entry.get("source") or {}
    if isinstance(src, dict):
        title = src.get("title")
        if isinstance(title, str) and title.strip():
            return title.strip()
    return DEFAULT_SOURCE


def parse_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw feedparser entry to a dict with the fields the pipeline uses.
    Fields: title, link, published_at (datetime|None), source, description
    """
    return {
        "title": (entry.get("title") or "").strip(),
        "link": (entry.get("link") or "").strip(),
        "published_at": _to_datetime(entry),
        "source": _get_source(entry),
        "description": entry.get("summary") or entry.get("description") or "",
    }


def parse_feed(text: str) -> List[Dict[str, Any]]:
    """
    Parse an RSS/Atom document into entry dicts, in document order.

    Raises ParseError when the document is malformed and yields no items.
    feedparser flags recoverable problems (e.g. encoding overrides) as bozo
    too; those documents are accepted as long as items were found.
    """
    # A stream keeps feedparser from treating the text as a URL or file path
    feed = feedparser.parse(io.BytesIO(text.encode("utf-8")))
    entries = getattr(feed, "entries", None)
    if not isinstance(entries, list):
        raise ParseError("Feed document has no item list")
    if getattr(feed, "bozo", 0) and not entries:
        exc = getattr(feed, "bozo_exception", None)
        msg = "Invalid RSS/Atom document"
        if exc:
            msg += f" ({exc})"
        raise ParseError(msg)
    return [parse_entry(e) for e in entries]
