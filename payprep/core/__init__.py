"""
Core Module - Shared domain models and primitives.

Components:
- models: Question, QuestionType, Difficulty, domain table and key orders
- rng: SeededRng and seed derivation
- exceptions: PayPrepError hierarchy
"""

from .exceptions import ContentError, EmptyPoolError, EmptySequenceError, PayPrepError
from .models import (
    DIFFICULTY_ORDER,
    DOMAIN_NAMES,
    DOMAIN_ORDER,
    TYPE_ORDER,
    Difficulty,
    Question,
    QuestionType,
)
from .rng import SeededRng, seed_from_inputs

__all__ = [
    "ContentError",
    "DIFFICULTY_ORDER",
    "DOMAIN_NAMES",
    "DOMAIN_ORDER",
    "Difficulty",
    "EmptyPoolError",
    "EmptySequenceError",
    "PayPrepError",
    "Question",
    "QuestionType",
    "SeededRng",
    "TYPE_ORDER",
    "seed_from_inputs",
]
