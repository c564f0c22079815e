from __future__ import annotations

from typing import List, Optional, Tuple

from rich.markup import escape
from rich.text import Text
from textual.reactive import reactive
from textual.widgets import Static

from .navigation import Focus, ViewState
from .reflow import wrap

HIGHLIGHT_SYMBOL = "│ "
FALLBACK_WIDTH = 40


def _usable_width(widget: Static, margin: int = 0) -> int:
    width = widget.size.width or FALLBACK_WIDTH
    return max(1, width - margin)


def visible_window(total: int, first: int, last: int, height: int) -> Tuple[int, int]:
    """Return the [start, end) line range of ``height`` lines that keeps
    lines ``first``..``last`` in view, preferring the top of the list."""
    if height <= 0 or total <= height:
        return 0, total
    start = 0
    if last >= height:
        start = last - height + 1
    start = min(start, first)
    return start, min(total, start + height)


# --- UI Widgets ---
class SectionTabs(Static):
    def show(self, view: ViewState) -> None:
        text = Text()
        for i, section in enumerate(view.sections):
            if i:
                text.append(" │ ", style="dim")
            if i == view.section_index:
                text.append(section.title, style="bold underline")
            else:
                text.append(section.title)
        self.update(text)


class StoryList(Static):
    def show(self, view: ViewState) -> None:
        self.set_class(view.focus is Focus.SECTION_LIST, "focused")
        if not view.stories:
            self.update(Text("Loading..." if view.fetch_pending else "No stories.", style="italic"))
            return

        width = _usable_width(self, len(HIGHLIGHT_SYMBOL))
        breaker = "─" * width
        lines: List[Text] = []
        first = last = 0
        for i, story in enumerate(view.stories):
            selected = i == view.story_index
            if selected:
                first = len(lines)
            for line in wrap(story.title, width).split("\n") + [breaker]:
                if selected:
                    lines.append(Text(HIGHLIGHT_SYMBOL + line, style="bold italic"))
                else:
                    lines.append(Text(" " * len(HIGHLIGHT_SYMBOL) + line))
            if selected:
                last = len(lines) - 1

        start, end = visible_window(len(lines), first, last, self.size.height)
        self.update(Text("\n").join(lines[start:end]))


class StoryBody(Static):
    def show(self, view: ViewState) -> None:
        self.set_class(view.focus is Focus.STORY_BODY, "focused")
        story = view.selected_story
        if story is None or view.body is None:
            self.update("")
            return

        title = wrap(story.title, _usable_width(self))
        header = Text()
        header.append(title, style="bold")
        header.append(f"\n{story.author} · {story.published_time}\n\n", style="dim")
        body_lines = view.body.split("\n")
        header_height = title.count("\n") + 3
        body_height = max(1, self.size.height - header_height)
        # The controller does not know the body length, so clamp here.
        offset = min(view.body_scroll, max(0, len(body_lines) - 1))
        body = "\n".join(body_lines[offset : offset + body_height])
        self.update(header + Text(body))

    def body_width(self) -> int:
        return _usable_width(self)


class StatusBar(Static):
    loading_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def show(self, view: ViewState) -> None:
        status: Optional[str] = None
        if view.fetch_pending:
            status = "Loading..."
        elif view.last_error:
            status = f"[b red]{escape(view.last_error)}[/]"
        self.loading_status = status or ""

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()
