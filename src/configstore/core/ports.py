"""Core ports (interfaces) for configstore.

These protocols define the boundaries between the configuration core and
the host application. They are intentionally small so the registry never
depends on how the host decides things like its build mode.
"""

from __future__ import annotations

from typing import MutableMapping, Protocol, runtime_checkable


@runtime_checkable
class HostEnvironment(Protocol):
    """Facts about the running host application."""

    def is_debug_mode_active(self) -> bool:
        """Return True when the host runs in debug mode."""


@runtime_checkable
class PropertyGroup(Protocol):
    """A prefixed bundle of settings the registry can persist and restore."""

    prefix: str
    debug: bool

    def store_properties(self, sink: MutableMapping[str, str]) -> None:
        """Write every setting as ``prefix + name = text`` into ``sink``."""

    def initialize_by_property(self, key: str, value: str) -> bool:
        """Apply one prefixed key/value pair; return True if it was used."""
