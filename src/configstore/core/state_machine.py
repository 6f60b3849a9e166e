"""Lifecycle state machine for a configuration registry.

Once constructed, load and save may follow each other in any order, so the
next state depends only on the event.
"""

from __future__ import annotations

from enum import Enum, auto


class RegistryState(Enum):
    CONSTRUCTED = auto()
    LOADED = auto()
    SAVED = auto()
    FAILED = auto()


class RegistryEvent(Enum):
    LOAD = auto()
    SAVE = auto()
    FAIL = auto()


_TRANSITIONS = {
    RegistryEvent.LOAD: RegistryState.LOADED,
    RegistryEvent.SAVE: RegistryState.SAVED,
    RegistryEvent.FAIL: RegistryState.FAILED,
}


class RegistryStateMachine:
    def __init__(self):
        self.state = RegistryState.CONSTRUCTED

    def transition(self, event: RegistryEvent) -> RegistryState:
        self.state = _TRANSITIONS[event]
        return self.state
