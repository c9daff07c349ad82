from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

import requests

from ..datamodels import Story
from .base import StoryStrategy
from .html import HtmlListingStrategy
from .search_api import SearchApiStrategy

logger = logging.getLogger("hn_glance")

# Tried in order; the first non-empty page wins.
DEFAULT_STRATEGIES: Sequence[Type[StoryStrategy]] = (
    HtmlListingStrategy,
    SearchApiStrategy,
)


class StrategyChain:
    def __init__(
        self,
        config: Dict[str, Any],
        session: Optional[requests.Session] = None,
        strategies: Optional[Sequence[StoryStrategy]] = None,
    ):
        self.config = config
        if strategies is None:
            strategies = [cls(config, session=session) for cls in DEFAULT_STRATEGIES]
        self.strategies: List[StoryStrategy] = list(strategies)

    def fetch_page(self, page: int) -> List[Story]:
        """Return the first non-empty result.

        Errors from every strategy but the last are logged and skipped; the
        last strategy's error reaches the caller.
        """
        for position, strategy in enumerate(self.strategies):
            is_last = position == len(self.strategies) - 1
            try:
                stories = strategy.fetch_page(page)
            except Exception as e:
                if is_last:
                    raise
                logger.warning("Strategy %s failed for page %d: %s", strategy.name, page, e)
                continue
            if stories:
                logger.debug(
                    "Strategy %s returned %d stories for page %d",
                    strategy.name,
                    len(stories),
                    page,
                )
                return stories
            if not is_last:
                logger.info("Strategy %s found no stories for page %d, falling back", strategy.name, page)
        return []
