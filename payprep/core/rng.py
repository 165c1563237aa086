"""
Seeded random source for attempts.

Every draw made while building an attempt (template variants, candidate
picks, allocator remainders, question id suffixes) goes through a single
SeededRng, so an attempt can be rebuilt from its seed.
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import TypeVar

from .exceptions import EmptySequenceError

T = TypeVar("T")


def seed_from_inputs(*parts: object) -> str:
    """
    Derive a compact seed string from arbitrary inputs.

    Attempts use (mode, ISO timestamp, random salt).

    Example:
        >>> seed_from_inputs("timed", "2025-01-01T00:00:00", "a1b2")
        '...'  # 16 hex chars, stable for the same inputs
    """
    joined = "|".join(str(p) for p in parts)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:16]


class SeededRng:
    """
    Deterministic pseudo-random source parameterized by a seed string.

    Not suitable for anything security related.
    """

    def __init__(self, seed: str):
        self.seed = str(seed)
        self._random = random.Random(self.seed)

    def next(self) -> float:
        """Next float in [0, 1)."""
        return self._random.random()

    def int_between(self, low: int, high: int) -> int:
        """Integer in [low, high], both inclusive."""
        low, high = int(low), int(high)
        if low > high:
            raise ValueError(f"int_between requires low <= high, got {low} > {high}")
        return low + int(self.next() * (high - low + 1))

    def float_between(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        return low + self.next() * (high - low)

    def pick(self, items: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        if not items:
            raise EmptySequenceError("Cannot pick from an empty sequence")
        return items[int(self.next() * len(items))]

    def __repr__(self) -> str:
        return f"SeededRng(seed={self.seed!r})"
