from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

from .config import MAX_ITEM_CHARS, MAX_TEXT_CHARS, MAX_TITLE_CHARS

ELLIPSIS = "..."
_WHITESPACE = re.compile(r"\s+")


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    if max_chars <= len(ELLIPSIS):
        return text[: max(0, max_chars)]
    return text[: max_chars - len(ELLIPSIS)] + ELLIPSIS


def collapse_whitespace(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def normalize(text: Optional[str], max_chars: int = MAX_TEXT_CHARS) -> str:
    """Collapse whitespace runs, strip, and clamp to ``max_chars``.

    Truncated results end with an ellipsis and are exactly ``max_chars``
    long, so normalizing twice gives the same string.
    """
    return _truncate(collapse_whitespace(text), max_chars)


def truncate_title(text: Optional[str]) -> str:
    return normalize(text, MAX_TITLE_CHARS)


def clamp_label(text: Optional[str]) -> str:
    return normalize(text, MAX_ITEM_CHARS)


def clamp_label_loose(text: Optional[str]) -> str:
    """Clamp a list label without touching its internal whitespace."""
    if not text:
        return ""
    return _truncate(text, MAX_ITEM_CHARS)


def html_to_text(fragment: Optional[str]) -> str:
    if not fragment:
        return ""
    soup = BeautifulSoup(f"<div>{fragment}</div>", "lxml")
    # Paragraph breaks carry no whitespace in comment markup.
    for tag in soup.find_all(["p", "br"]):
        tag.insert_before(" ")
    return collapse_whitespace(soup.get_text())
