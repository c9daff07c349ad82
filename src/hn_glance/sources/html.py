from __future__ import annotations

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..config import HN_BASE
from ..datamodels import Story
from ..session import retryable_fetch
from .base import StoryStrategy, resolve_story_url

logger = logging.getLogger("hn_glance")

# Title markup has changed over the years; newest first.
TITLE_SELECTORS = (".titleline > a", "a.storylink", "td.title a")
_NUMBER = re.compile(r"(\d+)")
_COMMENTS_LINK = re.compile(r"comment|discuss", re.I)
# The session adapter already retries connection errors and 429/5xx.
HTML_FETCH_ATTEMPTS = 1


class HtmlListingStrategy(StoryStrategy):
    """Scrape the rendered front page, the same listing a reader sees."""

    name = "html"

    def fetch_page(self, page: int) -> List[Story]:
        params = {"p": page} if page > 1 else None
        content = retryable_fetch(
            self.session,
            urljoin(HN_BASE, "news"),
            params=params,
            timeout=self.timeout,
            attempts=HTML_FETCH_ATTEMPTS,
        )
        if not content:
            return []
        try:
            return parse_stories(content)
        except Exception as e:
            logger.error("Failed to parse front page %d: %s", page, e)
            return []


def parse_stories(content: bytes | str) -> List[Story]:
    soup = BeautifulSoup(content, "lxml")
    stories: List[Story] = []
    for row in soup.select("tr.athing"):
        story = _parse_row(row)
        if story is not None:
            stories.append(story)
    return stories


def _parse_row(row: Tag) -> Optional[Story]:
    story_id = row.get("id", "")
    title_link = None
    for selector in TITLE_SELECTORS:
        if title_link := row.select_one(selector):
            break
    if title_link is None:
        return None

    title = title_link.get_text(strip=True) or "Untitled"
    href = title_link.get("href", "")
    url = resolve_story_url(story_id, urljoin(HN_BASE, href) if href else "")

    score = author = age = comment_count = None
    subtext = _find_subtext(row)
    if subtext is not None:
        if score_tag := subtext.select_one(".score"):
            score = _parse_number(score_tag.get_text(strip=True))
        if user_tag := subtext.select_one(".hnuser"):
            author = user_tag.get_text(strip=True) or None
        if age_tag := subtext.select_one(".age"):
            age = age_tag.get_text(strip=True) or None
        for link in subtext.find_all("a"):
            text = link.get_text(" ", strip=True)
            if _COMMENTS_LINK.search(text):
                comment_count = _parse_number(text) or 0

    return Story(
        id=story_id,
        title=title,
        url=url,
        score=score,
        author=author,
        comment_count=comment_count,
        age=age,
    )


def _find_subtext(row: Tag) -> Optional[Tag]:
    sibling = row.find_next_sibling("tr")
    if sibling is None:
        return None
    return sibling.select_one(".subtext")


def _parse_number(text: str) -> Optional[int]:
    match = _NUMBER.search(text)
    return int(match.group(1)) if match else None
