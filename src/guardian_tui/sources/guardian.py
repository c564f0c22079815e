from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from ..config import (
    API_URL,
    HTTP_TIMEOUT,
    PAGE_SIZE,
    REQUEST_HEADERS,
    SHOW_FIELDS,
    TIME_FORMAT,
    get_api_key,
)
from ..datamodels import Story
from .base import FetchError, Source

logger = logging.getLogger("guardian")

BEYOND_LAST_PAGE = "beyond the number of available pages"


class GuardianSource(Source):
    """Stories from the Guardian Content API."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.api_key = self.config.get("api_key") or get_api_key()
        if not self.api_key:
            raise ValueError("GUARDIAN_API_KEY must be set to use the guardian source.")
        self.api_url = self.config.get("api_url", API_URL)
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        return s

    def _params(self, section: str, page: int) -> Dict[str, Any]:
        return {
            "section": section,
            "page": page,
            "page-size": PAGE_SIZE,
            "order-by": "newest",
            "show-fields": ",".join(SHOW_FIELDS),
            "api-key": self.api_key,
        }

    def get_stories(self, section: str, page: int) -> List[Story]:
        logger.debug("Fetching %s page %d", section, page)
        try:
            resp = self.session.get(
                self.api_url, params=self._params(section, page), timeout=HTTP_TIMEOUT
            )
            if resp.status_code == 400 and _is_beyond_last_page(resp):
                logger.info("No page %d for %s, end of feed", page, section)
                return []
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            logger.warning("Fetch failed for %s page %d: %s", section, page, e)
            raise FetchError(f"Could not load {section}: {e}") from e
        except ValueError as e:
            logger.warning("Malformed response for %s page %d: %s", section, page, e)
            raise FetchError(f"Malformed response for {section}") from e

        response = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(response, dict):
            raise FetchError(f"Malformed response for {section}")
        if response.get("status") != "ok":
            message = response.get("message") or response.get("status") or "unknown error"
            raise FetchError(f"Guardian API error for {section}: {message}")

        pages = response.get("pages")
        if isinstance(pages, int) and page > pages:
            logger.info("%s has %d pages, page %d is past the end", section, pages, page)
            return []

        stories = []
        for result in response.get("results") or []:
            story = _story_from_result(result)
            if story is None:
                logger.debug("Dropping incomplete result %s", _result_id(result))
                continue
            stories.append(story)
        logger.debug("Fetched %d stories for %s page %d", len(stories), section, page)
        return stories


def _result_id(result: Any) -> str:
    if isinstance(result, dict):
        return str(result.get("id", "<no id>"))
    return "<invalid>"


def _story_from_result(result: Any) -> Optional[Story]:
    if not isinstance(result, dict):
        return None
    fields = result.get("fields") or {}
    body_text = fields.get("bodyText")
    headline = fields.get("headline")
    last_modified = fields.get("lastModified")
    byline = fields.get("byline")
    if not (body_text and headline and last_modified and byline):
        return None
    published = _format_time(last_modified)
    if published is None:
        return None
    return Story(
        title=headline.strip(),
        content=body_text,
        published_time=published,
        author=byline,
    )


def _format_time(value: str) -> Optional[str]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError, AttributeError):
        return None
    return parsed.strftime(TIME_FORMAT)


def _is_beyond_last_page(resp: requests.Response) -> bool:
    """The API answers a request past the last page with a 400, not an empty page."""
    try:
        message = resp.json().get("response", {}).get("message", "")
    except (ValueError, AttributeError):
        return False
    return isinstance(message, str) and BEYOND_LAST_PAGE in message
