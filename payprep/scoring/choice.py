"""
Single- and multi-choice handlers.
"""

from __future__ import annotations

from typing import Any

from payprep.core.models import Question, QuestionType

from . import register
from .base import INCORRECT, ScoreResult, as_index, as_sequence


def _choice_text(question: Question, index: Any) -> str:
    choices = question.choices or []
    index = as_index(index)
    if index is None or not 0 <= index < len(choices):
        return "-"
    return choices[index]


@register(QuestionType.SINGLE_CHOICE)
class SingleChoiceHandler:
    """Handler for single-choice questions (answer is a choice index)."""

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        selected = as_index(response)
        if selected is None:
            return INCORRECT
        return ScoreResult.all_or_nothing(selected == question.answer)

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        return _choice_text(question, answer)


@register(QuestionType.MULTI_CHOICE)
class MultiChoiceHandler:
    """
    Handler for multi-choice questions (answer is a set of choice indexes).

    Partial credit: (hits - wrong picks) / answer size, floored at 0.
    `correct` is only set for an exact set match.
    """

    def check(self, question: Question, response: Any, partial_credit: bool = False) -> ScoreResult:
        if isinstance(response, (set, frozenset)):
            response = list(response)
        selected_list = [] if response is None else as_sequence(response)
        answer_list = as_sequence(question.answer) or []
        if selected_list is None:
            return INCORRECT
        try:
            selected, answer = set(selected_list), set(answer_list)
        except TypeError:
            return INCORRECT

        is_correct = selected == answer
        if not partial_credit:
            return ScoreResult.all_or_nothing(is_correct)
        if not answer:
            return ScoreResult(correct=is_correct, earned=0.0)

        correct_count = len(selected & answer)
        incorrect_count = len(selected - answer)
        raw = max(correct_count - incorrect_count, 0)
        return ScoreResult(correct=is_correct, earned=min(raw / len(answer), 1.0))

    def expected(self, question: Question) -> Any:
        return question.answer

    def display(self, question: Question, answer: Any) -> str:
        if isinstance(answer, (set, frozenset)):
            answer = sorted(answer)
        indexes = as_sequence(answer)
        if indexes is None:
            return "-"
        return ", ".join(_choice_text(question, i) for i in indexes)
