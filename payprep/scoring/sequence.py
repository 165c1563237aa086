"""
Ordering and matching handlers.
"""

from __future__ import annotations

from typing import Any

from payprep.core.models import Question, QuestionType

from . import register
from .base import INCORRECT, ScoreResult, as_sequence, compare_sequence


def _label(labels: list[str] | None, index: Any) -> str:
    labels = labels or []
    if isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(labels):
        return labels[index]
    return "?"


@register(QuestionType.ORDERING)
class OrderingHandler:
    """
    Handler for ordering questions (response is a permutation of item indexes).

    Partial credit: fraction of positions holding the right item.
    """

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        answer = as_sequence(question.correct_order)
        is_correct = compare_sequence(response, answer)
        if not partial_credit:
            return ScoreResult.all_or_nothing(is_correct)
        selected = as_sequence(response)
        if selected is None or not answer:
            return INCORRECT
        matches = sum(1 for index, value in enumerate(selected) if index < len(answer) and value == answer[index])
        return ScoreResult(correct=is_correct, earned=matches / len(answer))

    def expected(self, question: Question) -> Any:
        return question.correct_order

    def display(self, question: Question, answer: Any) -> str:
        order = as_sequence(answer)
        if order is None:
            return "-"
        return " → ".join(_label(question.items, i) for i in order)


@register(QuestionType.MATCHING)
class MatchingHandler:
    """Handler for matching questions (response[i] is the right index for left[i])."""

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        return ScoreResult.all_or_nothing(compare_sequence(response, question.answer))

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        pairs = as_sequence(answer)
        if pairs is None:
            return "-"
        return "; ".join(f"{_label(question.left, i)} → {_label(question.right, j)}" for i, j in enumerate(pairs))
