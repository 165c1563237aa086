"""
Attempt report: flat summary plus a review list.
"""

from __future__ import annotations

from typing import Any

from payprep.scoring import format_answer, get_handler

from .results import QuestionResult, ScoredAttempt


def expected_answer(row: QuestionResult) -> Any:
    handler = get_handler(row.question.type)
    if handler is None:
        return row.question.answer
    return handler.expected(row.question)


def review_item(row: QuestionResult) -> dict[str, Any]:
    """One review entry: prompt, both answers rendered, explanation and steps."""
    question = row.question
    return {
        "id": question.id,
        "prompt": question.prompt,
        "domain": question.domain_name,
        "type": question.type,
        "difficulty": question.difficulty,
        "correct": row.correct,
        "earned": row.earned,
        "flagged": row.flagged,
        "time_spent": row.time_spent,
        "your_answer": format_answer(question, row.response),
        "correct_answer": format_answer(question, expected_answer(row)),
        "explanation": question.explanation,
        "steps": list(question.steps or []),
    }


def build_report(scored: ScoredAttempt, status: str | None = None) -> dict[str, Any]:
    """
    Report data for a scored attempt.

    Args:
        scored: The scored attempt
        status: Optional review filter ('correct', 'incorrect', 'flagged')
    """
    rows = scored.detail if status is None else scored.filter(status)
    return {
        "summary": scored.summary.model_dump(),
        "breakdowns": {k: [row.model_dump() for row in v] for k, v in scored.breakdowns.items()},
        "review": [review_item(row) for row in rows],
    }
