"""
Deterministic random stream.

A fast 32-bit mixing generator used by every sampling routine. It is not
cryptographically secure; its only guarantee is that an identical seed
always yields an identical sequence, which is what keeps simulations
reproducible across processes and runs.
"""

import hashlib
from typing import Any, Sequence, TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


class DeterministicRng:
    """Seeded uniform generator over [0, 1)."""

    __slots__ = ("seed", "_state")

    def __init__(self, seed: int | float = 0) -> None:
        self.seed = int(seed)
        self._state = (self.seed & MASK32) or _GOLDEN

    def random(self) -> float:
        """Returns the next value in [0, 1)."""
        s = (_imul(self._state ^ _GOLDEN, 0x85EBCA6B) + _GOLDEN) & MASK32
        s ^= s >> 15
        s = _imul(s | 1, s)
        s ^= (s + _imul(s ^ (s >> 7), s | 61)) & MASK32
        self._state = s
        return ((s ^ (s >> 14)) & MASK32) / 4294967296

    def randrange(self, count: int) -> int:
        """Returns an integer in [0, count)."""
        return int(self.random() * count)

    def choice(self, values: Sequence[T]) -> T:
        return values[self.randrange(len(values))]

    def chance(self, probability: float) -> bool:
        """Returns True with the given probability."""
        return probability > 0 and self.random() < probability


def seed_from(*parts: Any) -> int:
    """
    Derives a 32-bit seed from arbitrary printable parts.

    Args:
        *parts (Any): Values whose ``repr`` feeds the hash.

    Returns:
        int: A stable seed, identical across processes.

    """
    digest = hashlib.sha1("|".join(repr(p) for p in parts).encode("utf-8"))
    return int.from_bytes(digest.digest()[:4], "big")
