"""Local preferences: the profile card and the light/dark theme.

Both live in one JSON file on the host running the app, under the same keys
the browser version kept in localStorage.
"""

import json
from pathlib import Path
from typing import Any

from ..config import get_preferences_path
from ..logging_config import get_logger
from ..models.profile import Profile

logger = get_logger(__name__)

THEME_KEY = "my_gallery_theme"
PROFILE_KEY = "my_profile_data"

LIGHT = "light"
DARK = "dark"


class LocalPreferences:
    """JSON-file backed key/value preferences."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else get_preferences_path()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("preferences_unreadable", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get_theme(self) -> str:
        """Return "dark" only if dark was saved; anything else is light."""
        return DARK if self._read().get(THEME_KEY) == DARK else LIGHT

    def set_theme(self, theme: str) -> None:
        self._write(THEME_KEY, DARK if theme == DARK else LIGHT)

    def toggle_theme(self) -> str:
        """Flip the theme, persist it and return the new value."""
        theme = LIGHT if self.get_theme() == DARK else DARK
        self.set_theme(theme)
        logger.info("theme_toggled", theme=theme)
        return theme

    def load_profile(self) -> Profile:
        """Return the saved profile, or the default card if nothing usable is saved."""
        return Profile.from_dict(self._read().get(PROFILE_KEY))

    def save_profile(self, profile: Profile) -> None:
        self._write(PROFILE_KEY, profile.to_dict())
        logger.info("profile_saved", name=profile.name)


def get_preferences() -> LocalPreferences:
    """Preferences at the configured PREFERENCES_PATH."""
    return LocalPreferences()
