from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import HN_ITEM_API, HTTP_TIMEOUT
from .datamodels import CommentNode, Story
from .session import FetchError, fetch_json, session_from_config
from .sources.base import format_age
from .sources.manager import StrategyChain
from .text import html_to_text

logger = logging.getLogger("hn_glance")

DELETED_COMMENT = "[comment deleted]"


class ContentFetcher:
    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
        chain: Optional[StrategyChain] = None,
    ):
        self.config = config or {}
        self.session = session or session_from_config(self.config)
        self.chain = chain or StrategyChain(self.config, session=self.session)
        self.timeout = self.config.get("http_timeout", HTTP_TIMEOUT)

    def fetch_stories_page(self, page: int) -> List[Story]:
        return self.chain.fetch_page(page)

    def fetch_comments(self, story_id: str) -> List[CommentNode]:
        data = fetch_json(self.session, f"{HN_ITEM_API}/{story_id}", timeout=self.timeout)
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected item response for {story_id}")
        comments = flatten_comments(data.get("children"))
        logger.debug("Story %s has %d comments", story_id, len(comments))
        return comments


def flatten_comments(children: Any) -> List[CommentNode]:
    """Flatten a comment tree in pre-order, recording each node's depth.

    Deleted or empty comments keep their slot with a placeholder text so
    positions stay stable.
    """
    if not isinstance(children, list):
        return []
    comments: List[CommentNode] = []
    stack = [(node, 0) for node in reversed(children)]
    while stack:
        node, depth = stack.pop()
        if not isinstance(node, dict):
            continue
        author = node.get("author")
        raw_text = node.get("text")
        text = html_to_text(raw_text) if isinstance(raw_text, str) else ""
        comments.append(
            CommentNode(
                id=str(node.get("id", "")),
                text=text or DELETED_COMMENT,
                depth=depth,
                author=author if isinstance(author, str) else None,
                age=format_age(node.get("created_at")),
            )
        )
        kids = node.get("children")
        if isinstance(kids, list):
            stack.extend((child, depth + 1) for child in reversed(kids))
    return comments
