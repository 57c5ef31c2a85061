from __future__ import annotations

from typing import Iterable, Optional

from .models import NewsRecord


GEO_TERMS = ("india", "indian")
POWER_TERMS = (
    "power",
    "electricity",
    "grid",
    "demand",
    "supply",
    "peak",
    "renewable",
    "solar",
    "wind",
    "coal",
    "plf",
    "transmission",
    "discom",
    "energy",
)


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    t = text.lower()
    return any(k.lower() in t for k in keywords)


def is_relevant(record: NewsRecord, *,
                geo_terms: Optional[Iterable[str]] = None,
                topic_terms: Optional[Iterable[str]] = None,
                ) -> bool:
    """
    Keyword/geography co-occurrence predicate.

    Title, snippet and source are joined into one case-insensitive haystack;
    the record is relevant when it names the geography AND at least one
    power-sector term. Matching is by substring, so "Indian" matches
    "india" and "powergrid" matches "power".
    """
    hay = f"{record.title or ''} {record.snippet or ''} {record.source or ''}"
    return (
        _contains_any(hay, geo_terms if geo_terms is not None else GEO_TERMS)
        and _contains_any(hay, topic_terms if topic_terms is not None else POWER_TERMS)
    )
