"""
Canonical question model shared by generation, selection, scoring and attempts.

A Question is the hydrated, attempt-scoped form of a content entry: every
generator output has been merged in, so nothing downstream needs the
template registry again.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


class QuestionType(str, Enum):
    """Supported question shapes."""

    SINGLE_CHOICE = "mcq"
    MULTI_CHOICE = "msq"
    NUMERIC = "numeric"
    FREE_TEXT = "fill"
    ORDERING = "order"
    MATCHING = "match"
    MULTI_NUMERIC = "multi_numeric"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DOMAIN_NAMES: dict[int, str] = {
    1: "Payroll Fundamentals",
    2: "Calculations",
    3: "Compliance",
    4: "Systems & Controls",
    5: "Reporting & Ethics",
}

# Stable key orders used when walking weight maps.
DOMAIN_ORDER: tuple[int, ...] = (1, 2, 3, 4, 5)
DIFFICULTY_ORDER: tuple[str, ...] = tuple(d.value for d in Difficulty)
TYPE_ORDER: tuple[str, ...] = tuple(t.value for t in QuestionType)

FALLBACK_DOMAIN = 2
FALLBACK_DIFFICULTY = Difficulty.MEDIUM.value
FALLBACK_TYPE = QuestionType.SINGLE_CHOICE.value


def domain_name(domain: int | None) -> str | None:
    """Display name for a domain id, None when unknown."""
    if domain is None:
        return None
    return DOMAIN_NAMES.get(int(domain))


def domain_id_for_name(name: str, default: int = FALLBACK_DOMAIN) -> int:
    """Reverse lookup against DOMAIN_NAMES."""
    for domain_id, label in DOMAIN_NAMES.items():
        if label == name:
            return domain_id
    return default


@dataclass(frozen=True)
class Question:
    """
    A fully specified question inside one attempt.

    The answer shape depends on `type`:
        mcq            -> int (choice index)
        msq            -> list[int] (choice indexes)
        numeric        -> float
        fill           -> str (plus `acceptable` synonym groups)
        order          -> `correct_order` list[int] over `items`
        match          -> list[int], right index for each left item
        multi_numeric  -> list[float]
    """

    id: str
    pack_id: str
    domain: int
    difficulty: str
    type: str
    prompt: str
    domain_name: str | None = None
    template_id: str | None = None
    choices: list[str] | None = None
    answer: Any = None
    tolerance: float | list[float] | None = None
    relative_tolerance: float | None = None
    unit_hint: str | None = None
    acceptable: list[list[str]] | None = None
    items: list[str] | None = None
    left: list[str] | None = None
    right: list[str] | None = None
    correct_order: list[int] | None = None
    explanation: str = ""
    steps: list[str] | None = None
    tags: list[str] = field(default_factory=list)
    fun_only: bool = False
    variant: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        """Create from dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise TypeError(f"Question entry must be an object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
