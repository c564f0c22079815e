from __future__ import annotations
from dataclasses import dataclass


# --- Data models ---
@dataclass(frozen=True)
class Story:
    title: str
    content: str
    published_time: str
    author: str


@dataclass(frozen=True)
class Section:
    id: str
    title: str
