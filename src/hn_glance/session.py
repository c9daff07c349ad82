from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    HTTP_TIMEOUT,
    INITIAL_RETRY_DELAY,
    REQUEST_HEADERS,
    RETRY_ATTEMPTS,
    request_headers,
)

logger = logging.getLogger("hn_glance")


class FetchError(Exception):
    """A request failed or came back with an unusable response."""


def create_session(
    headers: Optional[Dict[str, str]] = None, retries: int = RETRY_ATTEMPTS
) -> requests.Session:
    s = requests.Session()
    s.headers.update(headers or REQUEST_HEADERS)
    retry = Retry(
        total=retries, backoff_factor=0.3, status_forcelist=[429, 500, 502, 503, 504]
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def session_from_config(config: Dict[str, Any]) -> requests.Session:
    return create_session(
        request_headers(config), retries=config.get("retry_attempts", RETRY_ATTEMPTS)
    )


def retryable_fetch(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = HTTP_TIMEOUT,
    attempts: int = RETRY_ATTEMPTS,
) -> Optional[bytes]:
    """Return the response body, or None once every attempt has failed."""
    delay = INITIAL_RETRY_DELAY
    for attempt in range(1, attempts + 1):
        try:
            logger.debug("Fetching %s (attempt %d/%d)", url, attempt, attempts)
            resp = session.get(url, params=params, timeout=timeout)
            resp.raise_for_status()
            logger.debug("Fetched %s OK", url)
            return resp.content
        except requests.RequestException as e:
            logger.debug("Fetch attempt %d failed for %s: %s", attempt, url, e)
            if attempt == attempts:
                logger.warning("All fetch attempts failed for %s", url)
                return None
            time.sleep(delay)
            delay *= 2
    return None


def fetch_json(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = HTTP_TIMEOUT,
) -> Any:
    """GET ``url`` and decode its JSON body, raising FetchError on failure."""
    logger.debug("Fetching JSON %s %s", url, params or "")
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e
    except ValueError as e:
        raise FetchError(f"Invalid JSON from {url}: {e}") from e
