class NewsError(Exception):
    """Base class for all power_news errors."""


class FetchError(NewsError):
    """Raised when the feed cannot be fetched or parsed into records."""


class TransportError(FetchError):
    """Raised when the relay/network is unreachable or answers with a non-success status."""


class ParseError(FetchError):
    """Raised when the feed document is malformed."""


class CacheReadError(NewsError):
    """Raised when a persisted cache value cannot be decoded."""


class ConfigError(NewsError):
    """Raised when an environment setting has an invalid value."""
