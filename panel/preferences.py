"""
Preferences - Per-prompt view mode and theme choice

Both live in the same key-value backend as the prompt collection, each under
its own key. Unknown or unreadable values fall back to the defaults.
"""

import logging

from .config import (
    DEFAULT_THEME,
    DEFAULT_VIEW_MODE,
    THEME_KEY,
    THEMES,
    VIEW_MODE_KEY_PREFIX,
    VIEW_MODES,
)


logger = logging.getLogger(__name__)


class Preferences:
    """Reads and writes display preferences."""

    def __init__(self, backend):
        self.backend = backend

    def get_view_mode(self, prompt_id: str) -> str:
        mode = self.backend.get(VIEW_MODE_KEY_PREFIX + prompt_id)
        return mode if mode in VIEW_MODES else DEFAULT_VIEW_MODE

    def set_view_mode(self, prompt_id: str, mode: str) -> None:
        """
        Remember how a prompt should be shown.

        Raises:
            ValueError: If mode is not 'plain' or 'rendered'
        """
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.backend.set(VIEW_MODE_KEY_PREFIX + prompt_id, mode)

    def toggle_view_mode(self, prompt_id: str) -> str:
        """Flip between plain and rendered; returns the new mode."""
        new_mode = "rendered" if self.get_view_mode(prompt_id) == "plain" else "plain"
        self.set_view_mode(prompt_id, new_mode)
        return new_mode

    def forget(self, prompt_id: str) -> None:
        """Drop the stored view mode of a deleted prompt."""
        self.backend.remove(VIEW_MODE_KEY_PREFIX + prompt_id)

    def get_theme(self) -> str:
        theme = self.backend.get(THEME_KEY)
        if theme is not None and theme not in THEMES:
            logger.warning(f"Unknown stored theme {theme!r}, using {DEFAULT_THEME}")
            return DEFAULT_THEME
        return theme or DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        """
        Raises:
            ValueError: If theme is not one of the known themes
        """
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme} (choose from {', '.join(THEMES)})")
        self.backend.set(THEME_KEY, theme)
