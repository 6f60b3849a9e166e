"""Typed, prefixed configuration groups.

A group is a class deriving from ``ConfigurationGroup`` that declares its
settings as ``Setting`` descriptors. The class keyword arguments fix the
key prefix and the debug-only flag:

    class UserPreferences(ConfigurationGroup, prefix="user_"):
        zoom = Setting(float, 1.0)
        show_grid = Setting(bool, True)

Every setting is persisted under ``prefix + name`` (``user_zoom``). The
name -> Setting table is built once per class, when the class is defined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, ClassVar, MutableMapping

logger = logging.getLogger(__name__)

ChangeListener = Callable[["ConfigurationGroup", str, Any, Any], None]


@dataclass(frozen=True)
class SettingCodec:
    """Text conversion for one setting kind.

    Attributes:
        parse: Turns file text into a value; raises ValueError/KeyError on bad input
        format: Turns a value into file text
    """

    parse: Callable[[str], Any]
    format: Callable[[Any], str]


def _parse_bool(text: str) -> bool:
    # Anything but the exact literal is False
    return text == "true"


_CODECS: dict[type, SettingCodec] = {
    bool: SettingCodec(parse=_parse_bool, format=lambda value: "true" if value else "false"),
    int: SettingCodec(parse=int, format=str),
    float: SettingCodec(parse=float, format=repr),
    str: SettingCodec(parse=str, format=str),
    Path: SettingCodec(parse=Path, format=str),
}


def _enum_codec(kind: type[Enum]) -> SettingCodec:
    return SettingCodec(parse=lambda text: kind[text], format=lambda value: value.name)


class Setting:
    """A single typed setting on a configuration group.

    Args:
        kind: bool, int, float, str, pathlib.Path or an Enum subclass
        default: Value a freshly constructed group reports
        clamp: Optional ``(low, high)`` bounds applied on every assignment; NaN is rejected
    """

    def __init__(self, kind: type, default: Any, *, clamp: tuple[Any, Any] | None = None):
        if isinstance(kind, type) and issubclass(kind, Enum):
            self.codec = _enum_codec(kind)
        elif kind in _CODECS:
            self.codec = _CODECS[kind]
        else:
            raise TypeError(f"Unsupported setting kind: {kind!r}")
        self.kind = kind
        self.clamp = clamp
        self.name = ""
        self.default = self._bounded(default)

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance, value) -> None:
        value = self._bounded(value)
        old = self.__get__(instance)
        instance.__dict__[self.name] = value
        if old != value:
            instance._notify(self.name, old, value)

    def _bounded(self, value):
        if self.clamp is None:
            return value
        low, high = self.clamp
        if value != value:
            raise ValueError(f"{self.name or 'value'} must lie in [{low}, {high}], got NaN")
        return min(max(value, low), high)

    def format(self, value) -> str:
        return self.codec.format(value)

    def parse(self, text: str):
        return self._bounded(self.codec.parse(text))


class ConfigurationGroup:
    """Base class for a prefixed bundle of settings."""

    prefix: ClassVar[str] = ""
    debug: ClassVar[bool] = False
    _settings: ClassVar[dict[str, Setting]] = {}

    def __init_subclass__(cls, prefix: str | None = None, debug: bool | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if prefix is not None:
            cls.prefix = prefix
        if debug is not None:
            cls.debug = debug

        settings: dict[str, Setting] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Setting):
                    settings[name] = attr
        cls._settings = settings

    def __init__(self):
        self._listeners: list[ChangeListener] = []

    @classmethod
    def settings(cls) -> list[str]:
        """Setting names in declaration order."""
        return list(cls._settings)

    def add_listener(self, listener: ChangeListener) -> None:
        """Call ``listener(group, name, old, new)`` whenever a setting changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, name: str, old, new) -> None:
        for listener in list(getattr(self, "_listeners", ())):
            try:
                listener(self, name, old, new)
            except Exception:
                logger.exception("Listener %r failed for %s%s", listener, self.prefix, name)

    def store_properties(self, sink: MutableMapping[str, str]) -> None:
        """Write every setting as ``prefix + name = text`` into ``sink``."""
        for name, setting in self._settings.items():
            sink[self.prefix + name] = setting.format(getattr(self, name))

    def to_properties(self) -> dict[str, str]:
        record: dict[str, str] = {}
        self.store_properties(record)
        return record

    def initialize_by_property(self, key: str, value: str) -> bool:
        """Assign one value read from the settings file.

        ``key`` must already start with this group's prefix. Unknown names
        and values that do not parse leave the group untouched.

        Returns:
            True if a setting was assigned
        """
        name = key[len(self.prefix):]
        setting = self._settings.get(name)
        if setting is None:
            logger.debug("No setting %r in group %r, ignoring key %s", name, self.prefix, key)
            return False

        try:
            parsed = setting.parse(value)
        except (ValueError, KeyError):
            logger.warning("Cannot read %s=%r as %s; keeping %r",
                           key, value, setting.kind.__name__, getattr(self, name))
            return False

        setattr(self, name, parsed)
        return True

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._settings)
        return f"{type(self).__name__}({values})"
