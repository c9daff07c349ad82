from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from ..config import HN_BASE, HTTP_TIMEOUT
from ..datamodels import Story
from ..session import session_from_config


class StoryStrategy(ABC):
    """One way of retrieving a page of front-page stories."""

    name = "base"

    def __init__(
        self, config: Dict[str, Any], session: Optional[requests.Session] = None
    ):
        self.config = config
        self.session = session or session_from_config(config)
        self.timeout = config.get("http_timeout", HTTP_TIMEOUT)

    @abstractmethod
    def fetch_page(self, page: int) -> List[Story]:
        """Return the stories on a one-based page, possibly none."""
        pass


def item_url(story_id: str) -> str:
    return urljoin(HN_BASE, f"item?id={story_id}")


def resolve_story_url(story_id: str, raw_url: Optional[str]) -> str:
    if raw_url and raw_url.strip():
        return raw_url.strip()
    return item_url(story_id)


def format_age(created_at: Optional[str]) -> Optional[str]:
    """Render an API timestamp as a plain date."""
    if not created_at:
        return None
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None
