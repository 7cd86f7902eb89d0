"""
Unit tests for local preferences.
"""

import json

from tagfolio.models.profile import Profile
from tagfolio.services.preferences import DARK, LIGHT, PROFILE_KEY, THEME_KEY, LocalPreferences, get_preferences


class TestTheme:
    """Test cases for the saved theme."""

    def test_default_theme_is_light(self, temp_dir):
        assert LocalPreferences(temp_dir / "prefs.json").get_theme() == LIGHT

    def test_toggle_theme_persists(self, temp_dir):
        path = temp_dir / "prefs.json"
        preferences = LocalPreferences(path)

        assert preferences.toggle_theme() == DARK
        assert LocalPreferences(path).get_theme() == DARK
        assert json.loads(path.read_text(encoding="utf-8"))[THEME_KEY] == "dark"

        assert preferences.toggle_theme() == LIGHT
        assert LocalPreferences(path).get_theme() == LIGHT

    def test_unknown_stored_theme_is_light(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text(json.dumps({THEME_KEY: "sepia"}), encoding="utf-8")

        assert LocalPreferences(path).get_theme() == LIGHT


class TestProfile:
    """Test cases for the saved profile card."""

    def test_missing_file_returns_default_profile(self, temp_dir):
        assert LocalPreferences(temp_dir / "missing.json").load_profile() == Profile()

    def test_save_and_load_profile(self, temp_dir):
        path = temp_dir / "nested" / "prefs.json"
        profile = Profile("김하늘", "사진 기록", "sky@example.com", "https://sky.test")

        LocalPreferences(path).save_profile(profile)

        assert LocalPreferences(path).load_profile() == profile
        assert "김하늘" in path.read_text(encoding="utf-8")

    def test_profile_and_theme_share_file(self, temp_dir):
        """Saving one key keeps the other."""
        path = temp_dir / "prefs.json"
        preferences = LocalPreferences(path)
        preferences.set_theme(DARK)
        preferences.save_profile(Profile(name="Kim"))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[THEME_KEY] == DARK
        assert data[PROFILE_KEY]["name"] == "Kim"

    def test_corrupt_file_falls_back_to_defaults(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        preferences = LocalPreferences(path)

        assert preferences.load_profile() == Profile()
        assert preferences.get_theme() == LIGHT

    def test_non_object_profile_falls_back_to_default(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text(json.dumps({PROFILE_KEY: "oops"}), encoding="utf-8")

        assert LocalPreferences(path).load_profile() == Profile()

    def test_get_preferences_uses_configured_path(self, tmp_path):
        assert get_preferences().path == tmp_path / "preferences.json"
