"""
Free-text (fill in the blank) handler.
"""

from __future__ import annotations

from typing import Any

from payprep.core.models import Question, QuestionType

from . import register
from .base import ScoreResult, normalize_text


@register(QuestionType.FREE_TEXT)
class FreeTextHandler:
    """
    Handler for free-text answers.

    The response matches when its normalized form equals any normalized
    synonym in `acceptable` (default: the single group [answer]).
    """

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        if response is None or isinstance(response, (list, tuple, dict, set)):
            return ScoreResult.all_or_nothing(False)
        normalized = normalize_text(response)
        if not normalized:
            return ScoreResult.all_or_nothing(False)
        correct = any(normalized in {normalize_text(s) for s in group} for group in self._groups(question))
        return ScoreResult.all_or_nothing(correct)

    @staticmethod
    def _groups(question: Question) -> list[list[str]]:
        if question.acceptable:
            return question.acceptable
        if question.answer is None:
            return []
        return [[question.answer]]

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        return str(answer)
