"""Configuration registry.

Owns the configuration groups of an application and one backing settings
file. ``load()`` routes every key of the file to each group whose prefix
starts the key; ``save()`` writes the groups back, one section per group.
Neither call raises: failures are logged and the application continues
with the settings it already holds in memory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..adapters.host_env import EnvHostEnvironment
from ..config import config
from . import properties
from .ports import HostEnvironment, PropertyGroup
from .state_machine import RegistryEvent, RegistryState, RegistryStateMachine

logger = logging.getLogger(__name__)


class Configuration:
    """Ordered collection of configuration groups backed by one file."""

    def __init__(
        self,
        file_path: str | Path,
        *groups: PropertyGroup,
        host: HostEnvironment | None = None,
        log: logging.Logger | None = None,
    ):
        self._file_path = Path(file_path)
        self._groups: list[PropertyGroup] = list(groups)
        self._host = host if host is not None else EnvHostEnvironment()
        self._log = log if log is not None else logger
        self._encoding = config.ENCODING
        self._state = RegistryStateMachine()

    @classmethod
    def from_env(cls, *groups: PropertyGroup, **kwargs) -> "Configuration":
        """Create a registry backed by the file named in ``CONFIGSTORE_FILE``."""
        return cls(config.CONFIG_FILE, *groups, **kwargs)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def groups(self) -> tuple[PropertyGroup, ...]:
        return tuple(self._groups)

    @property
    def state(self) -> RegistryState:
        return self._state.state

    def add(self, group: PropertyGroup) -> None:
        self._groups.append(group)

    def get_group(self, key: type | str) -> PropertyGroup | None:
        """Return the first group of the given class, or with the given prefix.

        A string is matched against prefixes exactly; a class matches its
        instances and those of its subclasses. Returns None when nothing
        matches.
        """
        if isinstance(key, str):
            return next((group for group in self._groups if group.prefix == key), None)
        return next((group for group in self._groups if isinstance(group, key)), None)

    def load(self) -> bool:
        """Read the backing file into the registered groups.

        Creates the file from the current defaults when it does not exist.

        Returns:
            True if the file was read (or created), False on failure
        """
        try:
            exists = self._file_path.exists()
        except OSError as e:
            self._log.error("Could not load configuration %s: %s", self._file_path, e, exc_info=True)
            self._state.transition(RegistryEvent.FAIL)
            return False
        if not exists:
            return self._write("Default configuration %s created", RegistryEvent.LOAD)

        try:
            with open(self._file_path, "rb") as stream:
                record = properties.decode(stream, self._encoding)
        except (OSError, properties.DecodeError) as e:
            self._log.error("Could not load configuration %s: %s", self._file_path, e, exc_info=True)
            self._state.transition(RegistryEvent.FAIL)
            return False

        self._apply(record)
        self._log.info("Configuration %s loaded", self._file_path)
        self._state.transition(RegistryEvent.LOAD)
        return True

    def save(self) -> bool:
        """Write all persistable groups to the backing file, truncating it.

        Returns:
            True if every section was written
        """
        return self._write("Configuration %s saved", RegistryEvent.SAVE)

    def _apply(self, record: dict[str, str]) -> None:
        # A key goes to every group whose prefix it starts with
        for key, value in record.items():
            for group in self._groups:
                if key.startswith(group.prefix):
                    group.initialize_by_property(key, value)

    def _persisted_groups(self) -> list[PropertyGroup]:
        debug_mode = self._host.is_debug_mode_active()
        groups = []
        for group in self._groups:
            if group.debug and not debug_mode:
                self._log.debug("Skipping debug-only group %r", group.prefix)
                continue
            groups.append(group)
        return groups

    def _write(self, success_message: str, event: RegistryEvent) -> bool:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._file_path, "wb") as stream:
                for group in self._persisted_groups():
                    record: dict[str, str] = {}
                    group.store_properties(record)
                    properties.encode(stream, record, f"{group.prefix}SETTINGS", self._encoding)
        except (OSError, ValueError) as e:
            # ValueError covers UnicodeError and values a group cannot format
            self._log.error("Could not write configuration %s: %s", self._file_path, e, exc_info=True)
            self._state.transition(RegistryEvent.FAIL)
            return False

        self._log.info(success_message, self._file_path)
        self._state.transition(event)
        return True

    def __repr__(self) -> str:
        prefixes = [group.prefix for group in self._groups]
        return f"Configuration({str(self._file_path)!r}, groups={prefixes})"
