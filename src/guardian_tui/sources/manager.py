from __future__ import annotations

from typing import Any, Dict, Optional, Type

from ..config import DEFAULT_SOURCE
from .base import Source
from .guardian import GuardianSource
from .rss import RSSSource

AVAILABLE_SOURCES: Dict[str, Type[Source]] = {
    "guardian": GuardianSource,
    "rss": RSSSource,
}


def get_source(config: Dict[str, Any], name: Optional[str] = None) -> Source:
    """Build the configured source. Raises ValueError if it cannot be used."""
    source_name = name or config.get("source", DEFAULT_SOURCE)
    source_class = AVAILABLE_SOURCES.get(source_name)
    if not source_class:
        raise ValueError(f"Unknown source: {source_name}")
    source_config = config.get("sources", {}).get(source_name, {})
    return source_class(source_config)
