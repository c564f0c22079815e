#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .app import GuardianApp
from .config import DEFAULT_THEME, load_config, setup_logging
from .sources.base import Source
from .sources.manager import AVAILABLE_SOURCES, get_source
from .themes import load_themes

logger = logging.getLogger("guardian")


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> None:
    config = load_config()
    available_themes = load_themes(config)

    parser = argparse.ArgumentParser(description="Guardian news TUI client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--theme",
        type=str,
        help=f"Set theme for this run. Available: {', '.join(available_themes.keys())}",
    )
    parser.add_argument(
        "--source",
        choices=sorted(AVAILABLE_SOURCES),
        help="Where stories come from (default: guardian, or the config's 'source')",
    )
    args = parser.parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    theme_name = args.theme or config.get("theme") or DEFAULT_THEME
    if theme_name not in available_themes:
        print(f"Theme '{theme_name}' not found, falling back to {DEFAULT_THEME}.", file=sys.stderr)
        theme_name = DEFAULT_THEME
    logger.info("Using theme: %s", theme_name)

    source: Optional[Source] = None
    source_error: Optional[str] = None
    try:
        source = get_source(config, args.source)
    except ValueError as e:
        logger.error("No usable source: %s", e)
        source_error = str(e)

    try:
        app = GuardianApp(
            source=source,
            theme=theme_name,
            themes=available_themes,
            source_error=source_error,
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
