"""Rewrite engine states and the transitions allowed between them."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class EngineState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    PREVIEWING = "previewing"
    AWAITING_DELIMITER = "awaiting_delimiter"
    PLANNING = "planning"
    COMMITTING = "committing"
    ABORTED = "aborted"


TRANSITIONS: Mapping[EngineState, frozenset[EngineState]] = MappingProxyType(
    {
        EngineState.IDLE: frozenset({EngineState.RESOLVING}),
        EngineState.RESOLVING: frozenset(
            {EngineState.PREVIEWING, EngineState.ABORTED}
        ),
        EngineState.PREVIEWING: frozenset({EngineState.AWAITING_DELIMITER}),
        EngineState.AWAITING_DELIMITER: frozenset(
            {EngineState.PLANNING, EngineState.ABORTED}
        ),
        EngineState.PLANNING: frozenset(
            {EngineState.COMMITTING, EngineState.ABORTED}
        ),
        EngineState.COMMITTING: frozenset({EngineState.IDLE}),
        EngineState.ABORTED: frozenset({EngineState.IDLE}),
    }
)


def can_transition(current: EngineState, target: EngineState) -> bool:
    return target in TRANSITIONS[current]
