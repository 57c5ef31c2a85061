"""Tests for chat message rendering."""

from datetime import datetime, timezone

from helpers import make_record
from power_news.render import CACHE_NOTE, LOADING_NOTE, format_card, render_messages


def test_format_card() -> None:
    record = make_record(1, title="India grid record", source="PTI",
                         published_at=datetime(2024, 6, 3, tzinfo=timezone.utc), snippet="Peak hit")
    assert format_card(record) == (
        "**India grid record**\n"
        "*PTI • 03/06/2024*\n"
        "<https://news.example.com/1>\n"
        "Peak hit"
    )


def test_format_card_without_snippet() -> None:
    assert format_card(make_record(1, snippet="")).endswith("<https://news.example.com/1>")


def test_render_counts_all_records_but_caps_cards() -> None:
    records = [make_record(i) for i in range(5)]
    messages = render_messages(records, max_items=2)
    text = "\n".join(messages)
    assert "Showing 5 articles" in text
    assert text.count("**India grid record**") == 2
    assert CACHE_NOTE in text


def test_render_includes_error_and_retry_hint() -> None:
    messages = render_messages([], error="Unable to load news")
    assert messages[0].startswith("⚠️ Unable to load news")
    assert "!refresh" in messages[0]
    assert "Showing 0 articles" in "\n".join(messages)


def test_render_splits_long_output() -> None:
    records = [make_record(i, snippet="s" * 180) for i in range(40)]
    messages = render_messages(records, limit=2000)
    assert len(messages) > 1
    assert all(len(m) <= 2000 for m in messages)
    assert sum(m.count("**India grid record**") for m in messages) == 40


def test_render_truncates_single_oversize_block() -> None:
    record = make_record(1, title="x" * 3000)
    messages = render_messages([record], limit=500)
    assert all(len(m) <= 500 for m in messages)


def test_render_shows_loading_notice() -> None:
    messages = render_messages([], loading=True)
    assert messages[0].startswith(LOADING_NOTE)
    assert LOADING_NOTE not in "\n".join(render_messages([]))
