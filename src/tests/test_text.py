from __future__ import annotations

import pytest

from hn_glance.text import (
    clamp_label,
    clamp_label_loose,
    html_to_text,
    normalize,
    truncate_title,
)


def test_normalize_collapses_whitespace():
    assert normalize("  hello \n\t  world  ") == "hello world"


def test_normalize_empty_input():
    assert normalize("") == ""
    assert normalize(None) == ""
    assert normalize("   \n ") == ""


def test_normalize_truncates_with_ellipsis():
    result = normalize("a" * 30, 10)
    assert result == "aaaaaaa..."
    assert len(result) == 10


@pytest.mark.parametrize(
    "text,max_chars",
    [
        ("short", 64),
        ("word " * 40, 64),
        ("x" * 2500, 2000),
        ("ab  cd " * 20, 17),
        ("abcdef", 2),
    ],
)
def test_normalize_bounded_and_idempotent(text, max_chars):
    once = normalize(text, max_chars)
    assert len(once) <= max_chars
    assert normalize(once, max_chars) == once


def test_title_and_label_budgets():
    long_title = "T" * 100
    assert len(truncate_title(long_title)) == 60
    assert len(clamp_label(long_title)) == 64


def test_clamp_label_loose_keeps_internal_whitespace():
    assert clamp_label_loose(">>  bob:  hi") == ">>  bob:  hi"
    loose = clamp_label_loose("a  b" * 30)
    assert len(loose) == 64
    assert loose.endswith("...")
    assert "  " in loose


def test_html_to_text():
    fragment = "First para<p>Second &amp; <i>last</i> para</p>"
    assert html_to_text(fragment) == "First para Second & last para"
    assert html_to_text("") == ""
    assert html_to_text(None) == ""
