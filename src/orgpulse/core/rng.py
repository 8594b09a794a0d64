"""Deterministic seeded random number generator (mulberry32)."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


class SeededRng:
    """Small, fast PRNG whose sequence depends only on the seed.

    The standard library ``random`` module is not used so that the same
    seed yields the same organization regardless of interpreter version.
    """

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    def next(self) -> float:
        """Return a float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        r = self._state
        r = _imul(r ^ (r >> 15), r | 1)
        r ^= (r + _imul(r ^ (r >> 7), r | 61)) & _MASK32
        return ((r ^ (r >> 14)) & _MASK32) / 4294967296

    def int(self, low: int, high: int) -> int:
        """Return an integer in [low, high], both inclusive."""
        return int(self.next() * (high - low + 1)) + low

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            msg = "Cannot pick from an empty sequence"
            raise ValueError(msg)
        return items[self.int(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy (Fisher-Yates); ``items`` is untouched."""
        copy = list(items)
        for i in range(len(copy) - 1, 0, -1):
            j = self.int(0, i)
            copy[i], copy[j] = copy[j], copy[i]
        return copy
