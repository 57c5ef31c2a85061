from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional

from .cache import CacheStore, FileStore
from .classifier import is_relevant
from .exceptions import FetchError
from .fetcher import FeedSource, RelaySource, build_feed_url, fetch_feed_text
from .models import DEFAULT_START_DATE, DateRange, LoadState, NewsRecord
from .normalizer import to_news_record
from .parser import parse_feed
from .textutil import today_iso_date

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Unable to load news – please try again later"
MAX_RECORDS = 100


@dataclass
class PipelineOptions:
    limit: int = MAX_RECORDS
    feed_url: Optional[str] = None
    default_start: str = DEFAULT_START_DATE


async def fetch_records(source: FeedSource, url: Optional[str] = None) -> List[NewsRecord]:
    """
    Fetch the feed and return only fully-valid records, in feed order.

    Items missing a title, link or parseable date are dropped. Raises
    FetchError (TransportError/ParseError) when the feed itself fails.
    """
    text = await fetch_feed_text(source, url or build_feed_url())
    entries = parse_feed(text)

    records: List[NewsRecord] = []
    for i, e in enumerate(entries):
        try:
            records.append(to_news_record(e, i))
        except ValueError as err:
            logger.debug("Dropping feed item %d: %s", i, err)
            continue
    logger.info("Parsed %d of %d feed items", len(records), len(entries))
    return records


def filter_sorted(records: Iterable[NewsRecord], date_range: DateRange) -> List[NewsRecord]:
    """
    Records published within ``date_range`` (UTC, inclusive), newest first.

    Records sharing a timestamp come out in the reverse of their input order.
    An unparseable range matches nothing.
    """
    bounds = date_range.bounds()
    if bounds is None:
        return []
    start, end = bounds
    kept = [r for r in records if start <= r.published_at <= end]
    kept.reverse()
    kept.sort(key=lambda r: r.published_at, reverse=True)
    return kept


class NewsPipeline:
    """
    Orchestrates cache → fetch → relevance filter → cap → cache write, and
    holds the state a presentation layer renders: ``records``, ``loading``,
    ``error`` and ``date_range``.

    Errors on the fetch path never escape ``load``; they move the pipeline
    to the ERROR state and keep the previously loaded records.
    """

    def __init__(
        self,
        cache: CacheStore,
        source: FeedSource,
        *,
        options: Optional[PipelineOptions] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.cache = cache
        self.source = source
        self.options = options or PipelineOptions()
        self.records: List[NewsRecord] = []
        self.loading = False
        self.error: Optional[str] = None
        self.state = LoadState.IDLE
        self.date_range = DateRange(self.options.default_start, today_iso_date(now))
        self._inflight: Optional["asyncio.Future[None]"] = None
        self._activated = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "NewsPipeline":
        cache = CacheStore(FileStore(settings.cache_path), ttl=settings.cache_ttl)
        source = RelaySource(settings.relay, timeout=settings.timeout)
        return cls(cache, source, options=PipelineOptions(limit=settings.limit))

    async def load(self, force: bool = False) -> None:
        """
        Load records from the cache (unless ``force``) or from the feed.

        A call made while another load is running joins that load instead
        of starting a second fetch.
        """
        if self._inflight is not None and not self._inflight.done():
            logger.debug("Load already in progress; waiting for it")
            await asyncio.shield(self._inflight)
            return

        task = asyncio.ensure_future(self._load(force))
        self._inflight = task
        try:
            await task
        finally:
            if self._inflight is task:
                self._inflight = None

    async def _load(self, force: bool) -> None:
        self.loading = True
        self.error = None
        self.state = LoadState.LOADING
        try:
            if not force:
                cached = self.cache.load()
                if cached is not None:
                    self.records = cached
                    self.state = LoadState.READY
                    logger.info("Loaded %d records from cache", len(cached))
                    return

            raw = await fetch_records(self.source, self.options.feed_url)
            relevant = [r for r in raw if is_relevant(r)][: self.options.limit]
            self.records = relevant
            self.cache.save(relevant)
            self.state = LoadState.READY
            logger.info("Fetched %d relevant records (%d parsed)", len(relevant), len(raw))
        except FetchError as e:
            logger.warning("News load failed: %s", e)
            self.error = ERROR_MESSAGE
            self.state = LoadState.ERROR
        except Exception:
            logger.exception("Unexpected error while loading news")
            self.error = ERROR_MESSAGE
            self.state = LoadState.ERROR
        finally:
            self.loading = False

    async def refresh(self) -> None:
        await self.load(force=True)

    async def activate(self) -> None:
        """
        Initial load from cache or network. Later calls do not load again,
        but wait for the initial load if it is still running.
        """
        if self._activated:
            if self._inflight is not None and not self._inflight.done():
                await asyncio.shield(self._inflight)
            return
        self._activated = True
        await self.load(False)

    def set_date_range(self, start: str, end: str) -> None:
        self.date_range = DateRange(start, end)

    def filtered_sorted(self, date_range: Optional[DateRange] = None) -> List[NewsRecord]:
        return filter_sorted(self.records, date_range or self.date_range)
