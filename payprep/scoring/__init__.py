"""
Scoring Engine: per-type response scoring.

Each question type has a handler module with:
- check(): Score a response, with optional partial credit
- expected(): The canonical answer in response shape
- display(): Render an answer for review
"""

from typing import TYPE_CHECKING, Any

from payprep.core.models import Question, QuestionType

if TYPE_CHECKING:
    from .base import ScoringHandler


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "ScoringHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a scoring handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: "str | QuestionType | None") -> "ScoringHandler | None":
    """Get the handler for a question type, None for unknown types."""
    if question_type is None:
        return None
    if not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(str(question_type).lower())
        except ValueError:
            return None
    return HANDLERS.get(question_type)


# Import handlers to trigger registration
from . import choice  # noqa: E402,F401
from . import numeric  # noqa: E402,F401
from . import sequence  # noqa: E402,F401
from . import text  # noqa: E402,F401

from .base import INCORRECT, ScoreResult  # noqa: E402


def score_question(question: Question | None, response: Any, partial_credit: bool = False) -> ScoreResult:
    """
    Score one response.

    Unknown question types and missing questions score as incorrect.
    """
    if question is None:
        return INCORRECT
    handler = get_handler(question.type)
    if handler is None:
        return INCORRECT
    return handler.check(question, response, partial_credit=partial_credit)


def format_answer(question: Question, answer: Any) -> str:
    """Render an answer for review; '-' when there is none."""
    if answer is None:
        return "-"
    handler = get_handler(question.type)
    if handler is None:
        return str(answer)
    return handler.display(question, answer)


__all__ = [
    "HANDLERS",
    "ScoreResult",
    "format_answer",
    "get_handler",
    "register",
    "score_question",
]
