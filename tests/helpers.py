"""Shared builders for feed documents and records."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from power_news.models import NewsRecord


def rss_item(
    title: str = "India power demand hits record peak",
    link: str = "https://news.example.com/a",
    pub_date: str = "Mon, 03 Jun 2024 07:30:00 GMT",
    source: Optional[str] = "ET EnergyWorld",
    description: str = "<a href=\"https://news.example.com/a\">India power demand</a>&nbsp;<font color=\"#6f6f6f\">ET EnergyWorld</font>",
) -> str:
    parts = [
        f"<title>{escape(title)}</title>",
        f"<link>{escape(link)}</link>",
        f"<pubDate>{escape(pub_date)}</pubDate>",
        f"<description>{escape(description)}</description>",
    ]
    if source is not None:
        parts.append(f'<source url="https://publisher.example.com">{escape(source)}</source>')
    return "<item>" + "".join(parts) + "</item>"


def rss_document(items: Iterable[str]) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Google News</title>'
        "<link>https://news.google.com</link><description>Google News</description>"
        + "".join(items)
        + "</channel></rss>"
    )


def make_record(
    idx: int = 0,
    *,
    title: str = "India grid record",
    published_at: Optional[datetime] = None,
    snippet: str = "Peak electricity demand in India",
    source: str = "PTI",
) -> NewsRecord:
    published_at = published_at or datetime(2024, 6, 3, 7, 30, tzinfo=timezone.utc)
    return NewsRecord(
        id=f"rec_{idx}",
        title=title,
        url=f"https://news.example.com/{idx}",
        source=source,
        published_at=published_at,
        snippet=snippet,
    )


class FakeSource:
    """FeedSource double returning canned text or raising."""

    def __init__(self, text: str = "", exc: Optional[Exception] = None) -> None:
        self.text = text
        self.exc = exc
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.text
