from __future__ import annotations

import logging

from trivia_quiz.storage.local_storage import LocalStorage

logger = logging.getLogger(__name__)

DARK = "dark"
LIGHT = "light"
DEFAULT_THEME_KEY = "ultimateQuizTheme"


class ThemePreference:
    """Dark/light display mode, read once at startup and written on every toggle."""

    def __init__(self, storage: LocalStorage, storage_key: str = DEFAULT_THEME_KEY):
        self.storage = storage
        self.storage_key = storage_key
        # Any stored value other than "dark" means light mode.
        self.dark_mode = storage.get_item(storage_key) == DARK

    @property
    def mode(self) -> str:
        return DARK if self.dark_mode else LIGHT

    def toggle(self) -> str:
        """Flip the mode, persist it, and return the new mode name."""
        self.dark_mode = not self.dark_mode
        self.storage.set_item(self.storage_key, self.mode)
        logger.debug("Theme switched to %s", self.mode)
        return self.mode
