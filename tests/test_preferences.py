from pathlib import Path

import pytest

from configstore.core.registry import Configuration
from configstore.adapters.host_env import StaticHostEnvironment
from configstore.preferences import (
    RECENT_FILES_CAPACITY,
    UI_SCALE_MAX,
    UI_SCALE_MIN,
    RecentFiles,
    Theme,
    UserPreferences,
)

A, B, C = Path("a.tmx"), Path("b.tmx"), Path("c.tmx")


def _recent(*paths):
    recent = RecentFiles()
    # Added oldest first so the list reads in the given order
    for path in reversed(paths):
        recent.add(path)
    return recent


def test_readding_path_moves_it_to_front():
    recent = _recent(A, B, C)
    assert list(recent) == [A, B, C]

    recent.add(B)
    assert list(recent) == [B, A, C]


def test_new_path_goes_to_front_and_evicts_oldest():
    recent = RecentFiles()
    for i in range(RECENT_FILES_CAPACITY + 1):
        recent.add(f"map{i}.tmx")

    assert len(recent) == RECENT_FILES_CAPACITY
    assert recent[0] == Path(f"map{RECENT_FILES_CAPACITY}.tmx")
    assert Path("map0.tmx") not in recent


def test_readding_in_full_list_keeps_everything():
    recent = RecentFiles()
    for i in range(RECENT_FILES_CAPACITY):
        recent.add(f"map{i}.tmx")

    recent.add("map3.tmx")
    assert len(recent) == RECENT_FILES_CAPACITY
    assert recent[0] == Path("map3.tmx")
    assert "map0.tmx" in recent


def test_empty_entries_are_ignored_and_slots_compact():
    recent = _recent(A, B)
    recent.add(None)
    recent.add("")

    assert list(recent) == [A, B]
    assert recent.slots() == [A, B] + [None] * (RECENT_FILES_CAPACITY - 2)
    assert None not in recent


def test_invalid_capacity():
    with pytest.raises(ValueError):
        RecentFiles(0)


def test_user_preferences_defaults():
    prefs = UserPreferences()
    assert prefs.prefix == "user_"
    assert prefs.debug is False
    assert prefs.zoom == 1.0
    assert prefs.show_grid is True
    assert prefs.render_custom_map_objects is False
    assert prefs.snap_division == 1
    assert prefs.last_game_file == Path(".")
    assert prefs.ui_scale == 1.0
    assert prefs.theme is Theme.DARK
    assert len(prefs.last_opened_files) == 0


def test_ui_scale_is_clamped():
    prefs = UserPreferences()
    prefs.ui_scale = 3.0
    assert prefs.ui_scale == UI_SCALE_MAX
    prefs.ui_scale = 0.1
    assert prefs.ui_scale == UI_SCALE_MIN


def test_opened_files_helpers():
    prefs = UserPreferences()
    prefs.add_opened_file("a.tmx")
    prefs.add_opened_file("b.tmx")
    assert list(prefs.last_opened_files) == [B, A]

    prefs.clear_opened_files()
    assert len(prefs.last_opened_files) == 0


def test_preferences_survive_save_and_load(tmp_path):
    path = tmp_path / "editor.properties"
    prefs = UserPreferences()
    prefs.zoom = 2.5
    prefs.show_grid = False
    prefs.width = 1280
    prefs.theme = Theme.LIGHT
    prefs.last_game_file = Path("games/demo.litidata")
    prefs.grid_color = "#ff0000"
    prefs.add_opened_file("a.tmx")

    Configuration(path, prefs, host=StaticHostEnvironment()).save()
    text = path.read_text()
    assert "user_theme = LIGHT" in text
    assert "last_opened_files" not in text

    restored = UserPreferences()
    Configuration(path, restored, host=StaticHostEnvironment()).load()
    assert restored.to_properties() == prefs.to_properties()
    assert restored.theme is Theme.LIGHT
    assert restored.last_game_file == Path("games/demo.litidata")
