"""Identifier generation helpers."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable


class IdSequence:
    """Monotonic positive integer identifiers owned by a single store."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("IdSequence must start at a positive integer.")
        self._next = start
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        self._next = next(self._counter)
        return self._next

    def observe(self, existing_ids: Iterable[int]) -> None:
        """Skip past identifiers already in use (e.g. seeded records)."""
        highest = max(existing_ids, default=0)
        if highest >= self._next:
            self._counter = itertools.count(highest + 1)
            self._next = highest


SequenceFactory = Callable[[], IdSequence]
