from __future__ import annotations

from typing import Any, Dict

from .models import NewsRecord
from .parser import DEFAULT_SOURCE
from .textutil import clamp, strip_markup, to_iso_instant


def to_news_record(entry: Dict[str, Any], index: int) -> NewsRecord:
    """
    Convert a parsed entry dict into a NewsRecord.
    Requires:
    - title (non-empty)
    - link (non-empty)
    - published_at (datetime)
    ``index`` is the entry's position in the parsed feed; together with the
    timestamp it forms the id, which is only unique within one parse pass.
    """
    title = entry.get("title") or ""
    link = entry.get("link") or ""
    published_at = entry.get("published_at")

    if not title or not link or not published_at:
        raise ValueError("Entry lacks required fields for NewsRecord: title/link/published_at")

    iso = to_iso_instant(published_at)
    return NewsRecord(
        id=f"{iso}_{index}",
        title=title,
        url=link,
        source=entry.get("source") or DEFAULT_SOURCE,
        published_at=published_at,
        snippet=clamp(strip_markup(entry.get("description"))),
    )
