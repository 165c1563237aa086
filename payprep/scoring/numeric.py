"""
Numeric and multi-part numeric handlers.
"""

from __future__ import annotations

from typing import Any

from payprep.core.models import Question, QuestionType

from . import register
from .base import INCORRECT, ScoreResult, as_sequence, compare_numeric, parse_number


def _fmt(question: Question, value: Any, with_unit: bool = True) -> str:
    number = parse_number(value)
    if number is None:
        return str(value)
    unit = (question.unit_hint or "") if with_unit else ""
    return f"{unit}{number:.2f}"


@register(QuestionType.NUMERIC)
class NumericHandler:
    """Handler for single numeric answers with absolute or relative tolerance."""

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        tolerance = question.tolerance if isinstance(question.tolerance, (int, float)) else 0
        correct = compare_numeric(response, question.answer, tolerance, question.relative_tolerance)
        return ScoreResult.all_or_nothing(correct)

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        return _fmt(question, answer)


@register(QuestionType.MULTI_NUMERIC)
class MultiNumericHandler:
    """
    Handler for multi-part numeric answers.

    Each component is checked against its own tolerance (a list) or a
    shared one; a missing or surplus component fails. Partial credit is
    the fraction of passing checks.
    """

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        values = as_sequence(response)
        answers = as_sequence(question.answer)
        if values is None or not answers:
            return INCORRECT

        checks = []
        for index, expected in enumerate(answers):
            if index >= len(values):
                checks.append(False)
                continue
            checks.append(
                compare_numeric(
                    values[index],
                    expected,
                    self._tolerance(question, index),
                    question.relative_tolerance,
                )
            )
        # surplus components count as failed
        checks.extend(False for _ in range(len(values) - len(answers)))

        correct = all(checks)
        if not partial_credit:
            return ScoreResult.all_or_nothing(correct)
        return ScoreResult(correct=correct, earned=sum(checks) / len(checks))

    @staticmethod
    def _tolerance(question: Question, index: int) -> float:
        tolerance = question.tolerance
        if isinstance(tolerance, (list, tuple)):
            return tolerance[index] if index < len(tolerance) else 0
        return tolerance or 0

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        values = as_sequence(answer)
        if values is None:
            return "-"
        return ", ".join(_fmt(question, v, with_unit=False) for v in values)
