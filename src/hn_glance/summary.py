from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests
from bs4 import BeautifulSoup

from .config import HTTP_TIMEOUT
from .datamodels import Story
from .session import session_from_config

logger = logging.getLogger("hn_glance")

# Title and description live in <head>; nothing past this is needed.
MAX_SUMMARY_BYTES = 256 * 1024
CHUNK_SIZE = 16 * 1024


class PageSummaryFetcher:
    """Best-effort title and description of the page a story links to."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or {}
        self.session = session or session_from_config(self.config)
        self.timeout = self.config.get("http_timeout", HTTP_TIMEOUT)

    def fetch_summary(self, story: Story) -> str:
        """Return at most two lines of summary, or "" if anything goes wrong."""
        try:
            with self.session.get(story.url, timeout=self.timeout, stream=True) as resp:
                if not resp.ok:
                    logger.debug("Summary fetch for %s returned %s", story.url, resp.status_code)
                    return ""
                content_type = resp.headers.get("content-type", "")
                if "text/html" not in content_type:
                    logger.debug("Skipping summary for %s (%s)", story.url, content_type)
                    return ""
                return parse_summary(self._read_head(resp))
        except Exception as e:
            logger.warning("Failed to fetch page summary for %s: %s", story.url, e)
            return ""

    def _read_head(self, resp: requests.Response) -> bytes:
        """Read at most MAX_SUMMARY_BYTES, stopping once ``timeout`` has elapsed."""
        deadline = time.monotonic() + self.timeout
        body = bytearray()
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            body.extend(chunk)
            if len(body) >= MAX_SUMMARY_BYTES or time.monotonic() >= deadline:
                break
        return bytes(body[:MAX_SUMMARY_BYTES])


def parse_summary(content: bytes | str) -> str:
    soup = BeautifulSoup(content, "lxml")
    parts = []
    if soup.title and (title := soup.title.get_text(strip=True)):
        parts.append(f"Page: {title}")
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and (description := (meta.get("content") or "").strip()):
        parts.append(description)
    return "\n".join(parts)
