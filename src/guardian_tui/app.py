from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import Resize
from textual.theme import Theme
from textual.widgets import Header
from textual.worker import Worker, WorkerState

from .config import API_KEY_ENV, CONFIG_PATH, DEFAULT_THEME
from .navigation import KEYMAP, NavEvent, NavigationController
from .screens import ErrorScreen
from .sources.base import Source
from .themes import BUILTIN_THEMES
from .widgets import SectionTabs, StatusBar, StoryBody, StoryList

logger = logging.getLogger("guardian")

KEY_DESCRIPTIONS = {
    NavEvent.MOVE_DOWN: "Down",
    NavEvent.MOVE_UP: "Up",
    NavEvent.NEXT_TAB: "Next section",
    NavEvent.FOCUS_RIGHT: "Read story",
    NavEvent.FOCUS_LEFT: "Story list",
    NavEvent.REFRESH: "Refresh",
    NavEvent.CYCLE_THEME: "Change theme",
    NavEvent.QUIT: "Quit",
}

KEYBINDING_HINT = (
    "[b {color}]tab[/] change section  [b {color}]up/down[/] scroll  "
    "[b {color}]left/right[/] focus  [b {color}]f5[/] refresh  "
    "[b {color}]f9[/] theme ({theme})  [b {color}]esc[/] quit"
)


class GuardianApp(App):
    TITLE = "Guardian"
    SUB_TITLE = "Terminal news reader"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding(key, f"nav('{event.value}')", KEY_DESCRIPTIONS[event], priority=True)
        for key, event in KEYMAP.items()
    ]

    def __init__(
        self,
        source: Optional[Source] = None,
        theme: Optional[str] = None,
        themes: Optional[Dict[str, Theme]] = None,
        source_error: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.source = source
        self.source_error = source_error
        self.themes = themes or dict(BUILTIN_THEMES)
        self.controller: Optional[NavigationController] = None
        if source is not None:
            self.controller = NavigationController(
                source.fetch,
                themes=list(self.themes),
                theme=theme or DEFAULT_THEME,
            )

    def compose(self) -> ComposeResult:
        yield Header()
        yield SectionTabs(id="sections")
        with Horizontal(id="main"):
            yield StoryList(id="stories")
            yield StoryBody(id="story")
        yield StatusBar()

    def on_mount(self) -> None:
        for theme in self.themes.values():
            self.register_theme(theme)

        if self.controller is None:
            self.push_screen(
                ErrorScreen(
                    "No news source available",
                    self.source_error
                    or f"Set `{API_KEY_ENV}` or choose the `rss` source in `{CONFIG_PATH}`.",
                )
            )
            return

        self.theme = self.controller.theme.selected()
        self.query_one(SectionTabs).border_title = "Sections"
        self.query_one(StoryList).border_title = "Stories"
        self.call_after_refresh(self.render_state)
        self.run_worker(
            self.controller.start(), name="nav:start", group="navigation", exit_on_error=False
        )

    def action_nav(self, name: str) -> None:
        if self.controller is None:
            return
        event = NavEvent(name)
        if event is NavEvent.QUIT:
            self.run_worker(self._quit(), name="nav:quit", group="navigation")
            return
        self.run_worker(
            self.controller.dispatch(event),
            name=f"nav:{event.value}",
            group="navigation",
            exit_on_error=False,
        )

    async def _quit(self) -> None:
        await self.controller.dispatch(NavEvent.QUIT)
        if not self.controller.running:
            self.exit()

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker.group != "navigation":
            return
        if event.state is WorkerState.ERROR:
            logger.error("Navigation worker %s failed: %s", event.worker.name, event.worker.error)
            self.notify(f"Unexpected error: {event.worker.error}", severity="error")
        elif event.state is WorkerState.SUCCESS and event.worker.result is False:
            if self.controller and self.controller.last_error:
                self.notify(self.controller.last_error, severity="error")
        self.render_state()

    def on_resize(self, event: Resize) -> None:
        # Widget sizes are only final after the next layout pass.
        self.call_after_refresh(self.render_state)

    def render_state(self) -> None:
        if self.controller is None:
            return
        try:
            body = self.query_one(StoryBody)
        except Exception:
            return  # Not mounted yet
        view = self.controller.snapshot(body.body_width())
        if self.theme != view.theme:
            self.theme = view.theme

        self.query_one(SectionTabs).show(view)
        self.query_one(StoryList).show(view)
        body.show(view)
        status = self.query_one(StatusBar)
        status.show(view)
        status.set_keybindings(KEYBINDING_HINT.format(color="$accent", theme=view.theme))
