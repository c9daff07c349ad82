from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..config import HN_SEARCH_API, SEARCH_HITS_PER_PAGE, SEARCH_TAG
from ..datamodels import Story
from ..session import FetchError, fetch_json
from .base import StoryStrategy, format_age, resolve_story_url

logger = logging.getLogger("hn_glance")


class SearchApiStrategy(StoryStrategy):
    """Front-page stories from the search API, used when scraping fails."""

    name = "search-api"

    def fetch_page(self, page: int) -> List[Story]:
        params = {
            "tags": SEARCH_TAG,
            # The API counts pages from zero.
            "page": max(0, page - 1),
            "hitsPerPage": SEARCH_HITS_PER_PAGE,
        }
        data = fetch_json(self.session, HN_SEARCH_API, params=params, timeout=self.timeout)
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected search response: {type(data).__name__}")
        hits = data.get("hits") or []
        return [story_from_hit(hit) for hit in hits if isinstance(hit, dict)]


def story_from_hit(hit: Dict[str, Any]) -> Story:
    story_id = str(hit.get("objectID", ""))
    return Story(
        id=story_id,
        title=(hit.get("title") or "").strip() or "Untitled",
        url=resolve_story_url(story_id, hit.get("url")),
        score=hit.get("points"),
        author=hit.get("author"),
        comment_count=hit.get("num_comments"),
        age=format_age(hit.get("created_at")),
    )
