"""Table-driven state machine helper."""

from __future__ import annotations

from collections.abc import Hashable, Mapping

from crm.core.exceptions import StateError


class StateMachine:
    """Resolves (state, event) pairs against an explicit transition table."""

    def __init__(self, transitions: Mapping[Hashable, Mapping[str, Hashable]]) -> None:
        self._transitions = transitions

    def can_fire(self, current: Hashable, event: str) -> bool:
        return event in self._transitions.get(current, {})

    def next_state(self, current: Hashable, event: str) -> Hashable:
        if not self.can_fire(current, event):
            raise StateError(f"Transition not allowed: {event} while {getattr(current, 'value', current)}")
        return self._transitions[current][event]
