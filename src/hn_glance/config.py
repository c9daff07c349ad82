from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Content sources ---
HN_BASE = "https://news.ycombinator.com/"
HN_SEARCH_API = "https://hn.algolia.com/api/v1/search"
HN_ITEM_API = "https://hn.algolia.com/api/v1/items"
SEARCH_TAG = "front_page"
SEARCH_HITS_PER_PAGE = 30

HTTP_TIMEOUT = 15
RETRY_ATTEMPTS = 4
INITIAL_RETRY_DELAY = 0.5

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) "
        "Gecko/20100101 Firefox/115.0"
    )
}

CONFIG_PATH = os.path.expanduser("~/.config/hn_glance/config.json")

# --- Display budgets ---
MAX_TEXT_CHARS = 2000
MAX_ITEM_CHARS = 64
MAX_TITLE_CHARS = 60
MAX_LIST_ITEMS = 20
MAX_COMMENT_INDENT = 4

# --- Layout ---
SURFACE_WIDTH = 640
TOTAL_HEIGHT = 350
LIST_HEIGHT_DEFAULT = 250
TEXT_HEIGHT_DEFAULT = 100
LIST_HEIGHT_EXPANDED = 175
TEXT_HEIGHT_EXPANDED = 175

LIST_CONTAINER_ID = 1
LIST_CONTAINER_NAME = "hn-list"
TEXT_CONTAINER_ID = 2
TEXT_CONTAINER_NAME = "hn-text"

# --- Logging ---
logger = logging.getLogger("hn_glance")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/hn_glance_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load optional overrides. The file is only ever read, never created."""
    if not os.path.exists(path):
        logger.debug("No config file at %s, using defaults", path)
        return {}
    try:
        with open(path, "r") as f:
            config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: expected a JSON object", path)
        return {}
    logger.info("Loaded config from %s", path)
    return config


def request_headers(config: Dict[str, Any]) -> Dict[str, str]:
    headers = dict(REQUEST_HEADERS)
    if user_agent := config.get("user_agent"):
        headers["User-Agent"] = user_agent
    return headers
