"""
power_news

A small pipeline that tracks Indian power sector news from Google News RSS.

Core ideas:
- Input: one Google News RSS search, fetched through a pass-through relay
- Process: fetch → parse → normalize → relevance filter → cap → cache (1 hour)
- Output: List[NewsRecord], filtered by date range and sorted newest first

Example
-------
import asyncio
from power_news import CacheStore, FileStore, NewsPipeline, RelaySource

pipeline = NewsPipeline(CacheStore(FileStore(".power_news_cache.json")), RelaySource())
asyncio.run(pipeline.activate())

pipeline.set_date_range("2024-01-01", "2024-12-31")
for record in pipeline.filtered_sorted():
    print(record.published_at, record.source, record.title)
"""
from .models import CacheEntry, DateRange, LoadState, NewsRecord
from .cache import CacheStore, FileStore, MemoryStore
from .classifier import is_relevant
from .fetcher import DirectSource, FeedSource, RelaySource, build_feed_url
from .core import ERROR_MESSAGE, NewsPipeline, PipelineOptions, fetch_records, filter_sorted
from .config import Settings, configure_logging, load_settings

__all__ = [
    "CacheEntry",
    "DateRange",
    "LoadState",
    "NewsRecord",
    "CacheStore",
    "FileStore",
    "MemoryStore",
    "is_relevant",
    "DirectSource",
    "FeedSource",
    "RelaySource",
    "build_feed_url",
    "ERROR_MESSAGE",
    "NewsPipeline",
    "PipelineOptions",
    "fetch_records",
    "filter_sorted",
    "Settings",
    "configure_logging",
    "load_settings",
]
