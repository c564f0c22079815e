from __future__ import annotations

import logging
from typing import Any, Dict

from textual.theme import Theme

logger = logging.getLogger("guardian")

# --- Theme Configuration ---
BUILTIN_THEMES: Dict[str, Theme] = {
    "default": Theme(
        name="default",
        primary="#ffffff",
        secondary="#ffff00",
        accent="#00ff00",
        foreground="#ffffff",
        background="#000032",
        surface="#000032",
        panel="#000046",
        dark=True,
    ),
    "paper": Theme(
        name="paper",
        primary="#4b4b32",
        secondary="#91914b",
        accent="#000000",
        foreground="#4b4b32",
        background="#ffffe6",
        surface="#ffffe6",
        panel="#f0f0d2",
        dark=False,
    ),
    "party": Theme(
        name="party",
        primary="#ffff00",
        secondary="#ffffff",
        accent="#808080",
        foreground="#ffff00",
        background="#ff00ff",
        surface="#ff00ff",
        panel="#e600e6",
        dark=True,
    ),
}


def load_themes(config: Dict[str, Any]) -> Dict[str, Theme]:
    """
    Return the built-in themes followed by any user themes defined under the
    config's ``themes`` key. Invalid user definitions are skipped.
    """
    themes = dict(BUILTIN_THEMES)
    for name, definition in config.get("themes", {}).items():
        try:
            themes[name] = Theme(name=name, **definition)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid theme definition for '%s': %s", name, e)
    return themes
