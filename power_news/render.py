from __future__ import annotations

from typing import List, Optional, Sequence

from .models import NewsRecord
from .textutil import format_ddmmyyyy

DISCORD_MESSAGE_LIMIT = 2000
CACHE_NOTE = "Cached for up to 1 hour. Refresh to fetch latest."
RETRY_HINT = "Use `!refresh` to try again."
LOADING_NOTE = "⏳ Loading the latest news, results may change shortly."


def format_card(record: NewsRecord) -> str:
    lines = [
        f"**{record.title}**",
        f"*{record.source} • {format_ddmmyyyy(record.published_at)}*",
        f"<{record.url}>",
    ]
    if record.snippet:
        lines.append(record.snippet)
    return "\n".join(lines)


def _split(blocks: Sequence[str], limit: int) -> List[str]:
    """Pack blocks into messages no longer than ``limit``, cutting oversize blocks."""
    messages: List[str] = []
    current = ""
    for block in blocks:
        if len(block) > limit:
            block = block[: limit - 3] + "..."
        candidate = f"{current}\n\n{block}" if current else block
        if len(candidate) > limit:
            messages.append(current)
            current = block
        else:
            current = candidate
    if current:
        messages.append(current)
    return messages


def render_messages(
    records: Sequence[NewsRecord],
    *,
    error: Optional[str] = None,
    loading: bool = False,
    max_items: Optional[int] = None,
    limit: int = DISCORD_MESSAGE_LIMIT,
) -> List[str]:
    """
    Turn the filtered, sorted view into chat messages.

    The header counts every record in the view even when ``max_items``
    shows fewer of them.
    """
    blocks: List[str] = []
    if loading:
        blocks.append(LOADING_NOTE)
    if error:
        blocks.append(f"⚠️ {error}\n{RETRY_HINT}")
    blocks.append(f"📰 Showing {len(records)} articles")
    shown = records if max_items is None else records[:max_items]
    blocks.extend(format_card(r) for r in shown)
    blocks.append(f"_{CACHE_NOTE}_")
    return _split(blocks, limit)
