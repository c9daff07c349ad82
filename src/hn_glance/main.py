#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional

from .app import GlanceApp
from .config import load_config, setup_logging

logger = logging.getLogger("hn_glance")


def resolve_start_page(page_arg: Optional[int], config: Dict[str, Any]) -> int:
    """First page to open: --page wins over config, anything unusable is page 1."""
    raw = page_arg or config.get("start_page") or 1
    try:
        page = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid start page %r", raw)
        return 1
    return max(1, page)


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Hacker News two-region reader")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--page", type=int, help="Front page to open first (default: 1)")
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    start_page = resolve_start_page(args.page, config)
    logger.info("Starting at page %d", start_page)

    try:
        app = GlanceApp(config=config, start_page=start_page)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
