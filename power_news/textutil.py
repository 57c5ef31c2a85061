from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from typing import Optional, Union

SNIPPET_LENGTH = 180
ELLIPSIS = "…"
NOT_A_DATE = "—"

# A tag starts with a letter, "/", "!" or "?" and may carry quoted attribute
# values containing ">". An unterminated "<" never matches and stays as text.
_TAG_RE = re.compile(r"""<[A-Za-z/!?](?:[^>"']|"[^"]*"|'[^']*')*>""")
_WS_RE = re.compile(r"\s+")


def clamp(text: Optional[str], n: int = SNIPPET_LENGTH) -> str:
    """Truncate ``text`` to ``n`` characters, appending an ellipsis when cut."""
    text = text or ""
    if len(text) <= n:
        return text
    return text[:n] + ELLIPSIS


def strip_markup(text: Optional[str]) -> str:
    """
    Remove HTML/XML tags, decode entities and collapse whitespace.

    Nested tags are removed one by one, so ``<b><i>x</i></b>`` becomes ``x``.
    Malformed markup (a ``<`` that is never closed, or a lone ``a < b``) is
    kept verbatim rather than swallowing the remainder of the text.
    """
    if not text:
        return ""
    out = _TAG_RE.sub(" ", text)
    out = html.unescape(out)
    return _WS_RE.sub(" ", out).strip()


def today_iso_date(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d")


def to_iso_instant(dt: datetime) -> str:
    """Canonical UTC instant, e.g. ``2024-03-01T10:15:00.000Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    base = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if dt.microsecond % 1000:
        return f"{base}.{dt.microsecond:06d}Z"
    return f"{base}.{dt.microsecond // 1000:03d}Z"


def parse_iso_instant(value: Optional[str]) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    s = value.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_ddmmyyyy(value: Union[datetime, str, None]) -> str:
    """Display date as ``DD/MM/YYYY``; a dash when the value is not a date."""
    if isinstance(value, datetime):
        dt: Optional[datetime] = value
    else:
        dt = parse_iso_instant(value)
    if dt is None:
        return NOT_A_DATE
    return dt.strftime("%d/%m/%Y")
