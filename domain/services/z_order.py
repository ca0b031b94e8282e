from __future__ import annotations

from collections.abc import Iterable


def _seed_above(static_values: Iterable[int], item_count: int) -> int:
    return max(max(static_values, default=0), item_count) + 1


class ZOrderAllocator:
    def __init__(self, seed: int = 1) -> None:
        self._next = seed

    @classmethod
    def above(cls, static_values: Iterable[int], item_count: int = 0) -> ZOrderAllocator:
        return cls(_seed_above(static_values, item_count))

    @property
    def next_value(self) -> int:
        return self._next

    def reset_above(self, static_values: Iterable[int], item_count: int = 0) -> None:
        """Lift the counter above a new static layout; it never moves down."""
        self._next = max(self._next, _seed_above(static_values, item_count))

    def allocate(self) -> int:
        value = self._next
        self._next += 1
        return value
