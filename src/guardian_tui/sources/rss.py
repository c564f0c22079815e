from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import feedparser
from bs4 import BeautifulSoup

from ..config import PAGE_SIZE, RSS_URL_TEMPLATE, TIME_FORMAT
from ..datamodels import Story
from .base import FetchError, Source

logger = logging.getLogger("guardian")


class RSSSource(Source):
    """Stories from the public Guardian section feeds. No API key needed.

    The feeds are not paginated, so every page after the first is empty.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.url_template = self.config.get("url_template", RSS_URL_TEMPLATE)

    def get_stories(self, section: str, page: int) -> List[Story]:
        if page > 1:
            return []
        url = self.url_template.format(section=section)
        logger.debug("Parsing feed %s", url)
        feed = feedparser.parse(url)
        if feed.get("bozo") and not feed.entries:
            error = feed.get("bozo_exception")
            logger.warning("Feed %s could not be parsed: %s", url, error)
            raise FetchError(f"Could not load {section}: {error}")

        stories = []
        for entry in feed.entries:
            story = _story_from_entry(entry)
            if story is None:
                logger.debug("Dropping incomplete entry %s", entry.get("link"))
                continue
            stories.append(story)
        return stories[:PAGE_SIZE]


def _story_from_entry(entry: Dict[str, Any]) -> Optional[Story]:
    title = entry.get("title")
    summary_html = entry.get("summary")
    published = entry.get("published_parsed") or entry.get("updated_parsed")
    author = entry.get("author")
    if not (title and summary_html and published and author):
        return None
    content = BeautifulSoup(summary_html, "lxml").get_text(" ", strip=True)
    if not content:
        return None
    return Story(
        title=title.strip(),
        content=content,
        published_time=time.strftime(TIME_FORMAT, published),
        author=author,
    )
