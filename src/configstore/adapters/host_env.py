"""Host environment adapters answering the debug-mode query."""

from __future__ import annotations

from ..config import config


class EnvHostEnvironment:
    """Reads debug mode from the ``DEBUG`` environment setting."""

    def is_debug_mode_active(self) -> bool:
        return config.DEBUG


class StaticHostEnvironment:
    """Fixed answer, for embedding hosts and tests."""

    def __init__(self, debug: bool = False):
        self._debug = debug

    def is_debug_mode_active(self) -> bool:
        return self._debug
