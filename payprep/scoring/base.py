"""
Base protocol, result type and comparison helpers for scoring handlers.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Protocol

from payprep.core.models import Question

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ScoreResult:
    """Result of scoring one response."""

    correct: bool
    earned: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "earned", min(max(float(self.earned), 0.0), 1.0))

    @classmethod
    def all_or_nothing(cls, correct: bool) -> ScoreResult:
        return cls(correct=correct, earned=1.0 if correct else 0.0)


INCORRECT = ScoreResult(correct=False, earned=0.0)


class ScoringHandler(Protocol):
    """Protocol for question type handlers."""

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        """Score a response. Never raises on malformed responses."""
        ...

    def expected(self, question: Question) -> Any:
        """The canonical answer in response shape."""
        ...

    def display(self, question: Question, answer: Any) -> str:
        """Human-readable rendering of an answer in response shape."""
        ...


def normalize_text(value: Any) -> str:
    """Trim, lowercase and collapse internal whitespace runs."""
    return _WHITESPACE.sub(" ", str(value).strip().lower())


def parse_number(value: Any) -> float | None:
    """Parse a numeric response; None for anything that is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def compare_numeric(
    response: Any,
    answer: Any,
    tolerance: float | None = 0,
    relative_tolerance: float | None = None,
) -> bool:
    """
    Check a numeric response against an answer.

    Relative tolerance, when set, takes precedence over the absolute one.
    """
    value = parse_number(response)
    expected = parse_number(answer)
    if value is None or expected is None:
        return False
    diff = abs(value - expected)
    if relative_tolerance is not None:
        return diff <= abs(expected) * relative_tolerance
    return diff <= (tolerance or 0)


def as_index(value: Any) -> int | None:
    """An int index, or None for bools and anything non-integral."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_sequence(value: Any) -> list | None:
    """A list copy of a list/tuple response, None for any other shape."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def compare_sequence(response: Any, answer: Any) -> bool:
    """Position-for-position equality of two sequences."""
    left, right = as_sequence(response), as_sequence(answer)
    if left is None or right is None or len(left) != len(right):
        return False
    return all(a == b for a, b in zip(left, right))
