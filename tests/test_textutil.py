"""Tests for text utilities."""

from datetime import datetime, timezone

from power_news.textutil import (
    clamp,
    format_ddmmyyyy,
    parse_iso_instant,
    strip_markup,
    to_iso_instant,
    today_iso_date,
)

# ---------------------------------------------------------------------------
# clamp
# ---------------------------------------------------------------------------


def test_clamp_keeps_short_text() -> None:
    assert clamp("short") == "short"
    assert clamp("x" * 180) == "x" * 180


def test_clamp_truncates_with_ellipsis() -> None:
    out = clamp("x" * 181)
    assert out == "x" * 180 + "…"


def test_clamp_none_is_empty() -> None:
    assert clamp(None) == ""


# ---------------------------------------------------------------------------
# strip_markup
# ---------------------------------------------------------------------------


def test_strip_markup_simple_tags() -> None:
    assert strip_markup("<p>Grid <b>collapse</b></p>") == "Grid collapse"


def test_strip_markup_nested_tags() -> None:
    assert strip_markup("<b><i>x</i></b>") == "x"


def test_strip_markup_quoted_gt_in_attribute() -> None:
    assert strip_markup('<a title="a > b" href="/x">link</a> text') == "link text"


def test_strip_markup_decodes_entities() -> None:
    assert strip_markup("Power&nbsp;&amp;&nbsp;Energy") == "Power & Energy"


def test_strip_markup_keeps_unterminated_tag_text() -> None:
    assert strip_markup("Demand rose <b unterminated") == "Demand rose <b unterminated"


def test_strip_markup_keeps_comparison_operators() -> None:
    assert strip_markup("PLF < 60% and > 40%") == "PLF < 60% and > 40%"


def test_strip_markup_empty_input() -> None:
    assert strip_markup("") == ""
    assert strip_markup(None) == ""


def test_strip_markup_collapses_whitespace() -> None:
    assert strip_markup("a\n\n  <br/>\tb") == "a b"


# ---------------------------------------------------------------------------
# dates
# ---------------------------------------------------------------------------


def test_today_iso_date_uses_utc() -> None:
    now = datetime(2024, 6, 3, 23, 30, tzinfo=timezone.utc)
    assert today_iso_date(now) == "2024-06-03"


def test_iso_instant_milliseconds_with_z() -> None:
    dt = datetime(2024, 6, 3, 7, 30, tzinfo=timezone.utc)
    assert to_iso_instant(dt) == "2024-06-03T07:30:00.000Z"


def test_parse_iso_instant_accepts_z_suffix() -> None:
    dt = parse_iso_instant("2024-06-03T07:30:00.000Z")
    assert dt == datetime(2024, 6, 3, 7, 30, tzinfo=timezone.utc)


def test_parse_iso_instant_preserves_microseconds() -> None:
    dt = datetime(2024, 6, 3, 7, 30, 0, 1, tzinfo=timezone.utc)
    assert parse_iso_instant(to_iso_instant(dt)) == dt


def test_parse_iso_instant_rejects_garbage() -> None:
    assert parse_iso_instant("yesterday") is None
    assert parse_iso_instant("") is None
    assert parse_iso_instant(None) is None


def test_format_ddmmyyyy() -> None:
    assert format_ddmmyyyy(datetime(2024, 6, 3, tzinfo=timezone.utc)) == "03/06/2024"
    assert format_ddmmyyyy("2024-12-25T10:00:00.000Z") == "25/12/2024"
    assert format_ddmmyyyy("nope") == "—"
