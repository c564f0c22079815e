from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..datamodels import Story


class FetchError(Exception):
    """A page of stories could not be fetched or understood."""


class Source(ABC):
    """Abstract base class for a news source."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def get_stories(self, section: str, page: int) -> List[Story]:
        """Return one page of stories for a section, newest first.

        Raises FetchError when the page cannot be retrieved.
        """

    async def fetch(self, section: str, page: int) -> List[Story]:
        """Run get_stories off the event loop."""
        return await asyncio.to_thread(self.get_stories, section, page)
