"""Editor user preferences - a configuration group consumer.

Holds the map editor's per-user settings under the ``user_`` prefix and the
list of recently opened files.
"""

from __future__ import annotations

from collections import deque
from enum import Enum, auto
from pathlib import Path
from typing import Iterator

from .core.group import ConfigurationGroup, Setting

UI_SCALE_MIN = 0.5
UI_SCALE_MAX = 2.0
RECENT_FILES_CAPACITY = 10
DEFAULT_GRID_COLOR = "#e0e0e0"


class Theme(Enum):
    """Editor colour theme."""

    LIGHT = auto()
    DARK = auto()


class RecentFiles:
    """Most-recently-used list of file paths, newest first.

    Adding a path already in the list moves it to the front; adding a new
    path to a full list drops the oldest one. Empty entries are ignored.
    """

    def __init__(self, capacity: int = RECENT_FILES_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._paths: deque[Path] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._paths.maxlen

    def add(self, path: str | Path | None) -> None:
        if path is None or path == "":
            return
        path = Path(path)
        if path in self._paths:
            self._paths.remove(path)
        self._paths.appendleft(path)

    def clear(self) -> None:
        self._paths.clear()

    def slots(self) -> list[Path | None]:
        """Fixed-width view: the paths, then ``None`` up to capacity."""
        return list(self._paths) + [None] * (self.capacity - len(self._paths))

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __getitem__(self, index: int) -> Path:
        return self._paths[index]

    def __contains__(self, path) -> bool:
        if path is None or path == "":
            return False
        return Path(path) in self._paths

    def __repr__(self) -> str:
        return f"RecentFiles({[str(p) for p in self._paths]})"


class UserPreferences(ConfigurationGroup, prefix="user_"):
    zoom = Setting(float, 1.0)
    show_grid = Setting(bool, True)
    clamp_to_map = Setting(bool, True)
    snap_to_pixels = Setting(bool, True)
    snap_to_grid = Setting(bool, True)
    render_bounding_boxes = Setting(bool, True)
    render_custom_map_objects = Setting(bool, False)
    render_map_ids = Setting(bool, False)
    render_names = Setting(bool, True)
    compress_file = Setting(bool, False)
    sync_maps = Setting(bool, False)

    # Window geometry
    frame_state = Setting(int, 0)
    main_splitter = Setting(int, 0)
    selection_edit_splitter = Setting(int, 0)
    map_panel_splitter = Setting(int, 0)
    bottom_splitter = Setting(int, 0)
    assets_splitter = Setting(int, 0)
    width = Setting(int, 0)
    height = Setting(int, 0)

    grid_line_width = Setting(float, 1.0)
    grid_color = Setting(str, DEFAULT_GRID_COLOR)
    snap_division = Setting(int, 1)

    last_game_file = Setting(Path, Path("."))
    ui_scale = Setting(float, 1.0, clamp=(UI_SCALE_MIN, UI_SCALE_MAX))
    theme = Setting(Theme, Theme.DARK)

    def __init__(self):
        super().__init__()
        # Not persisted: one key per slot would be needed
        self.last_opened_files = RecentFiles()

    def add_opened_file(self, path: str | Path | None) -> None:
        self.last_opened_files.add(path)

    def clear_opened_files(self) -> None:
        self.last_opened_files.clear()
