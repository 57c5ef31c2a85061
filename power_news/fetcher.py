from __future__ import annotations

import logging
from typing import Optional, Protocol
from urllib.parse import quote, urlencode

import httpx

from .exceptions import TransportError

logger = logging.getLogger(__name__)

GOOGLE_NEWS_RSS = "https://news.google.com/rss/search"
DEFAULT_QUERY = (
    "(India power sector OR India electricity OR India power demand "
    "OR India grid OR India renewable energy)"
)
DEFAULT_RELAY = "https://api.allorigins.win/raw?url={url}"
DEFAULT_TIMEOUT_SEC = 30.0


def build_feed_url(query: str = DEFAULT_QUERY, *,
                   hl: str = "en-IN", gl: str = "IN", ceid: str = "IN:en") -> str:
    """Google News RSS search URL for ``query``, localized to the given region."""
    params = urlencode({"q": query, "hl": hl, "gl": gl, "ceid": ceid}, quote_via=quote)
    return f"{GOOGLE_NEWS_RSS}?{params}"


def relay_url(target: str, relay: str = DEFAULT_RELAY) -> str:
    """Embed the percent-encoded target URL into a relay template."""
    return relay.format(url=quote(target, safe=""))


class FeedSource(Protocol):
    async def fetch(self, url: str) -> str:  # pragma: no cover - interface
        ...


class DirectSource:
    """
    Fetch the feed URL directly.

    Raises TransportError on network errors, timeouts and non-2xx responses.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SEC,
                 client: Optional[httpx.AsyncClient] = None) -> None:
        self.timeout = timeout
        self._client = client

    def _request_url(self, url: str) -> str:
        return url

    async def fetch(self, url: str) -> str:
        target = self._request_url(url)
        try:
            if self._client is not None:
                response = await self._client.get(target)
                response.raise_for_status()
                return response.text
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(target)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Feed request failed with HTTP {e.response.status_code}: {target}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch feed: {target} ({e})") from e


class RelaySource(DirectSource):
    """Fetch the feed through a pass-through relay that mirrors the raw body."""

    def __init__(self, relay: str = DEFAULT_RELAY, *, timeout: float = DEFAULT_TIMEOUT_SEC,
                 client: Optional[httpx.AsyncClient] = None) -> None:
        super().__init__(timeout=timeout, client=client)
        self.relay = relay

    def _request_url(self, url: str) -> str:
        return relay_url(url, self.relay)


async def fetch_feed_text(source: FeedSource, url: str) -> str:
    text = await source.fetch(url)
    logger.debug("Fetched %d characters from %s", len(text), url)
    return text
