"""
Story navigation and pagination state.

The controller owns all browsing state and is driven by abstract
``NavEvent`` values. It never touches the terminal: the render adapter asks
for a ``ViewState`` snapshot after every event.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import (
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from .config import LOOKAHEAD_MARGIN, SECTIONS
from .datamodels import Section, Story
from .reflow import wrap
from .sources.base import FetchError

logger = logging.getLogger("guardian")

T = TypeVar("T")

FetchFn = Callable[[str, int], Awaitable[List[Story]]]


class Focus(enum.Enum):
    SECTION_LIST = "section_list"
    STORY_BODY = "story_body"


class NavEvent(enum.Enum):
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    NEXT_TAB = "next_tab"
    FOCUS_RIGHT = "focus_right"
    FOCUS_LEFT = "focus_left"
    REFRESH = "refresh"
    CYCLE_THEME = "cycle_theme"
    QUIT = "quit"


# Key name -> event. Each key maps to exactly one event.
KEYMAP: Dict[str, NavEvent] = {
    "down": NavEvent.MOVE_DOWN,
    "up": NavEvent.MOVE_UP,
    "tab": NavEvent.NEXT_TAB,
    "right": NavEvent.FOCUS_RIGHT,
    "left": NavEvent.FOCUS_LEFT,
    "f5": NavEvent.REFRESH,
    "f9": NavEvent.CYCLE_THEME,
    "escape": NavEvent.QUIT,
    "q": NavEvent.QUIT,
}


class Cursor(Generic[T]):
    """Circular, forward-only selection over a fixed table."""

    def __init__(self, items: Sequence[T], index: int = 0):
        if not items:
            raise IndexError("cursor needs at least one item")
        if not 0 <= index < len(items):
            raise IndexError(f"cursor index {index} out of range for {len(items)} items")
        self._items: Tuple[T, ...] = tuple(items)
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def items(self) -> Tuple[T, ...]:
        return self._items

    def selected(self) -> T:
        return self._items[self._index]

    def following(self) -> T:
        """The item ``next()`` would select."""
        return self._items[(self._index + 1) % len(self._items)]

    def next(self) -> None:
        self._index = (self._index + 1) % len(self._items)


class SectionCursor(Cursor[Section]):
    def __init__(self, sections: Sequence[Section] = SECTIONS, index: int = 0):
        super().__init__(sections, index)


class StoryCollection:
    """Paginated stories for the selected section, plus the selection."""

    def __init__(self) -> None:
        self._items: List[Story] = []
        self._selected: Optional[int] = None
        self._page = 1

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Story]:
        return iter(self._items)

    @property
    def items(self) -> Tuple[Story, ...]:
        return tuple(self._items)

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def current_page(self) -> int:
        return self._page

    def replace(self, stories: Iterable[Story]) -> None:
        self._items = list(stories)
        self._selected = 0 if self._items else None
        self._page = 1

    def append(self, stories: Iterable[Story]) -> None:
        self._items.extend(stories)
        if self._selected is None and self._items:
            self._selected = 0

    def select_next(self) -> None:
        if self._selected is None:
            return
        if self._selected < len(self._items) - 1:
            self._selected += 1

    def select_previous(self) -> None:
        if self._selected is None:
            return
        if self._selected > 0:
            self._selected -= 1

    def selected(self) -> Optional[Story]:
        if self._selected is None:
            return None
        return self._items[self._selected]

    def needs_more(self) -> bool:
        if self._selected is None:
            return False
        return self._selected >= len(self._items) - LOOKAHEAD_MARGIN

    def advance_page(self) -> int:
        self._page += 1
        return self._page


@dataclass(frozen=True)
class ViewState:
    """Read-only snapshot handed to the renderer each frame."""

    sections: Tuple[Section, ...]
    section_index: int
    stories: Tuple[Story, ...]
    story_index: Optional[int]
    body: Optional[str]
    body_scroll: int
    focus: Focus
    theme: str
    fetch_pending: bool
    last_error: Optional[str]

    @property
    def selected_story(self) -> Optional[Story]:
        if self.story_index is None:
            return None
        return self.stories[self.story_index]


class NavigationController:
    """
    Turns NavEvents into state transitions.

    At most one fetch is outstanding at a time. Events that would start a
    second fetch are dropped without changing any state. A failed fetch
    leaves the stories, selection, section and page untouched and records
    the error in ``last_error`` so the same input can be retried.
    """

    def __init__(
        self,
        fetch: FetchFn,
        sections: Sequence[Section] = SECTIONS,
        themes: Sequence[str] = ("default",),
        theme: Optional[str] = None,
    ):
        self._fetch = fetch
        self.section = SectionCursor(sections)
        self.stories = StoryCollection()
        self.theme = Cursor(themes, themes.index(theme) if theme in themes else 0)
        self.focus = Focus.SECTION_LIST
        self.body_scroll = 0
        self.body_width: Optional[int] = None
        self.fetch_pending = False
        self.last_error: Optional[str] = None
        self.exhausted = False
        self.running = True

    async def start(self) -> bool:
        """Load the first page of the first section."""
        logger.info("Loading initial section %s", self.section.selected().id)
        return await self.dispatch(NavEvent.REFRESH)

    def would_fetch(self, event: NavEvent) -> bool:
        if event in (NavEvent.NEXT_TAB, NavEvent.REFRESH):
            return True
        return (
            event is NavEvent.MOVE_DOWN
            and self.focus is Focus.SECTION_LIST
            and not self.exhausted
            and self.stories.needs_more()
        )

    async def dispatch(self, event: NavEvent) -> bool:
        """Apply ``event``. Returns False if it was dropped or its fetch failed."""
        if self.would_fetch(event) and self.fetch_pending:
            logger.debug("Dropping %s: a fetch is already pending", event.value)
            return False

        if event is NavEvent.MOVE_DOWN:
            return await self._move_down()
        if event is NavEvent.MOVE_UP:
            self._move_up()
        elif event is NavEvent.NEXT_TAB:
            return await self._next_tab()
        elif event is NavEvent.REFRESH:
            return await self._refresh()
        elif event is NavEvent.FOCUS_RIGHT:
            if self.focus is Focus.SECTION_LIST:
                self.focus = Focus.STORY_BODY
        elif event is NavEvent.FOCUS_LEFT:
            if self.focus is Focus.STORY_BODY:
                self.focus = Focus.SECTION_LIST
        elif event is NavEvent.CYCLE_THEME:
            self.theme.next()
            logger.debug("Theme is now %s", self.theme.selected())
        elif event is NavEvent.QUIT:
            self.running = False
        return True

    async def _move_down(self) -> bool:
        if self.focus is Focus.STORY_BODY:
            limit = self._max_body_scroll()
            if limit is None or self.body_scroll < limit:
                self.body_scroll += 1
            return True

        if self.would_fetch(NavEvent.MOVE_DOWN):
            section = self.section.selected()
            page = self.stories.current_page + 1
            more = await self._run_fetch(section, page)
            if more is None:
                return False
            # Section may not change while the fetch is pending.
            self.stories.advance_page()
            if more:
                self.stories.append(more)
            else:
                logger.info("No more stories in %s after page %d", section.id, page - 1)
                self.exhausted = True

        self.stories.select_next()
        self.body_scroll = 0
        return True

    def _move_up(self) -> None:
        if self.focus is Focus.STORY_BODY:
            self.body_scroll = max(0, self.body_scroll - 1)
            return
        self.stories.select_previous()
        self.body_scroll = 0

    async def _next_tab(self) -> bool:
        section = self.section.following()
        stories = await self._run_fetch(section, 1)
        if stories is None:
            return False
        self.section.next()
        self._install(stories)
        return True

    async def _refresh(self) -> bool:
        stories = await self._run_fetch(self.section.selected(), 1)
        if stories is None:
            return False
        self._install(stories)
        return True

    def _install(self, stories: List[Story]) -> None:
        self.stories.replace(stories)
        self.exhausted = False
        self.body_scroll = 0

    async def _run_fetch(self, section: Section, page: int) -> Optional[List[Story]]:
        self.fetch_pending = True
        try:
            stories = await self._fetch(section.id, page)
        except FetchError as e:
            logger.error("Fetch of %s page %d failed: %s", section.id, page, e)
            self.last_error = str(e)
            return None
        finally:
            self.fetch_pending = False
        self.last_error = None
        logger.debug("Fetched %d stories for %s page %d", len(stories), section.id, page)
        return stories

    def _max_body_scroll(self) -> Optional[int]:
        """Offset of the last body line, once a frame has fixed the width."""
        story = self.stories.selected()
        if story is None or self.body_width is None:
            return None
        return wrap(story.content, self.body_width).count("\n")

    def snapshot(self, body_width: int) -> ViewState:
        self.body_width = body_width
        story = self.stories.selected()
        body = wrap(story.content, body_width) if story is not None else None
        if body is not None:
            self.body_scroll = min(self.body_scroll, body.count("\n"))
        return ViewState(
            sections=self.section.items,
            section_index=self.section.index,
            stories=self.stories.items,
            story_index=self.stories.selected_index,
            body=body,
            body_scroll=self.body_scroll,
            focus=self.focus,
            theme=self.theme.selected(),
            fetch_pending=self.fetch_pending,
            last_error=self.last_error,
        )
