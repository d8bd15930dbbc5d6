"""Persisted theme preference.

A single key records the theme: ``"light"`` when the user chose the light
theme, absent for the default dark theme. The backing mapping is NiceGUI's
persistent ``app.storage.general`` in the running app, or a plain dict in tests.
"""

from collections.abc import MutableMapping
from typing import Any

THEME_KEY = "theme"
LIGHT_THEME = "light"


class ThemePreference:
    """Reads and toggles the stored theme."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    @property
    def is_light(self) -> bool:
        return self._storage.get(THEME_KEY) == LIGHT_THEME

    def toggle(self) -> bool:
        """Switch between light and dark.

        Returns:
            True if the light theme is now active.
        """
        if self.is_light:
            self._storage.pop(THEME_KEY, None)
        else:
            self._storage[THEME_KEY] = LIGHT_THEME
        return self.is_light
