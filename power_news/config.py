from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from dotenv import load_dotenv

from .cache import CACHE_TTL_SEC
from .core import MAX_RECORDS
from .exceptions import ConfigError
from .fetcher import DEFAULT_RELAY, DEFAULT_TIMEOUT_SEC


@dataclass
class Settings:
    relay: str = DEFAULT_RELAY
    cache_path: str = ".power_news_cache.json"
    cache_ttl: float = CACHE_TTL_SEC
    timeout: float = DEFAULT_TIMEOUT_SEC
    limit: int = MAX_RECORDS
    log_level: str = "INFO"
    discord_token: Optional[str] = None


def _env_number(name: str, default: Union[int, float], kind: type) -> Union[int, float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = kind(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from environment variables, reading ``.env`` first.

    POWER_NEWS_RELAY       relay template with a ``{url}`` placeholder
    POWER_NEWS_CACHE_PATH  JSON file backing the cache slot
    POWER_NEWS_CACHE_TTL   freshness window in seconds
    POWER_NEWS_TIMEOUT     HTTP timeout in seconds
    POWER_NEWS_LIMIT       max relevant records kept per fetch
    POWER_NEWS_LOG_LEVEL   logging level name
    DISCORD_BOT_TOKEN      token for discord_bot.py
    """
    if dotenv:
        load_dotenv()

    relay = os.getenv("POWER_NEWS_RELAY") or DEFAULT_RELAY
    if "{url}" not in relay:
        raise ConfigError("POWER_NEWS_RELAY must contain a {url} placeholder")

    return Settings(
        relay=relay,
        cache_path=os.getenv("POWER_NEWS_CACHE_PATH") or Settings.cache_path,
        cache_ttl=_env_number("POWER_NEWS_CACHE_TTL", CACHE_TTL_SEC, float),
        timeout=_env_number("POWER_NEWS_TIMEOUT", DEFAULT_TIMEOUT_SEC, float),
        limit=int(_env_number("POWER_NEWS_LIMIT", MAX_RECORDS, int)),
        log_level=(os.getenv("POWER_NEWS_LOG_LEVEL") or "INFO").upper(),
        discord_token=os.getenv("DISCORD_BOT_TOKEN") or None,
    )


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """Install a stream handler on the root logger. Call once from an entry point."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ConfigError(f"Unknown log level: {level!r}")
        level = resolved
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
