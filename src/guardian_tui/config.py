from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .datamodels import Section

# --- Configuration ---
API_URL = "https://content.guardianapis.com/search"
RSS_URL_TEMPLATE = "https://www.theguardian.com/{section}/rss"
API_KEY_ENV = "GUARDIAN_API_KEY"
HTTP_TIMEOUT = 15
PAGE_SIZE = 10
SHOW_FIELDS = ("bodyText", "headline", "lastModified", "byline")
TIME_FORMAT = "%H:%M:%S"

# Stories left below the selection before the next page is requested.
LOOKAHEAD_MARGIN = 3

CONFIG_PATH = os.path.expanduser("~/.config/guardian/config.json")

REQUEST_HEADERS = {
    "User-Agent": "guardian-tui/0.1 (+https://github.com/)",
    "Accept": "application/json",
}

SECTIONS: Tuple[Section, ...] = (
    Section("world", "World"),
    Section("sport", "Sport"),
    Section("technology", "Technology"),
    Section("science", "Science"),
    Section("culture", "Culture"),
    Section("lifeandstyle", "Life & style"),
    Section("money", "Money"),
    Section("weather", "Weather"),
)

DEFAULT_SOURCE = "guardian"
DEFAULT_THEME = "default"

# --- Logging ---
logger = logging.getLogger("guardian")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/guardian_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the optional configuration file. Nothing is ever written back."""
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        logger.debug("No config file at %s, using defaults.", path)
        return {}
    try:
        with open(path, "r") as f:
            config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: top level is not an object", path)
        return {}
    logger.info("Loaded config from %s", path)
    return config


def get_api_key() -> Optional[str]:
    return os.environ.get(API_KEY_ENV) or None
