"""
Attempt scoring and result aggregation.

Scores every question of an attempt, then rolls the results up into a flat
summary and per-dimension breakdowns (domain, type, difficulty, time band).
The summary, with its breakdowns, is what goes into history and feeds the
weakness profiler.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from payprep.core.models import Question
from payprep.scoring import score_question

if TYPE_CHECKING:
    from .state import AttemptState

UNKNOWN_LABEL = "Unknown"

TIME_BANDS: list[tuple[str, Callable[[float], bool]]] = [
    ("<20s", lambda seconds: seconds < 20),
    ("20-60s", lambda seconds: 20 <= seconds <= 60),
    (">60s", lambda seconds: seconds > 60),
]


def percent(part: float, whole: float) -> int:
    """Whole-number percentage, halves rounded up; 0 when whole is 0."""
    if not whole:
        return 0
    return math.floor(part / whole * 100 + 0.5)


class BreakdownRow(BaseModel):
    """Correct/total for one label of one dimension."""

    label: str
    total: int
    correct: int
    percent: int


class AttemptSummary(BaseModel):
    """Flat attempt result, also the unit stored in history."""

    attempt_id: str
    mode: str
    seed: str
    score_percent: int
    passed: bool
    total_earned: float
    question_count: int
    time_used: int = 0
    date: str | None = None
    domain_breakdown: list[BreakdownRow] = Field(default_factory=list)
    type_breakdown: list[BreakdownRow] = Field(default_factory=list)
    difficulty_breakdown: list[BreakdownRow] = Field(default_factory=list)


@dataclass
class QuestionResult:
    """One scored question of an attempt."""

    question: Question
    response: Any
    correct: bool
    earned: float
    time_spent: int = 0
    flagged: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question.to_dict(),
            "response": self.response,
            "correct": self.correct,
            "earned": self.earned,
            "time_spent": self.time_spent,
            "flagged": self.flagged,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuestionResult:
        return cls(
            question=Question.from_dict(data["question"]),
            response=data.get("response"),
            correct=bool(data.get("correct")),
            earned=float(data.get("earned", 0)),
            time_spent=int(data.get("time_spent", 0)),
            flagged=bool(data.get("flagged", False)),
        )


@dataclass
class ScoredAttempt:
    """Summary, detail rows and all four breakdowns of a finished attempt."""

    summary: AttemptSummary
    detail: list[QuestionResult]
    breakdowns: dict[str, list[BreakdownRow]]

    def filter(self, status: str) -> list[QuestionResult]:
        """Detail rows by status: 'correct', 'incorrect' or 'flagged'."""
        if status == "correct":
            return [row for row in self.detail if row.correct]
        if status == "incorrect":
            return [row for row in self.detail if not row.correct]
        if status == "flagged":
            return [row for row in self.detail if row.flagged]
        raise ValueError(f"Unknown status filter: {status!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.model_dump(),
            "detail": [row.to_dict() for row in self.detail],
            "breakdowns": {k: [row.model_dump() for row in v] for k, v in self.breakdowns.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScoredAttempt:
        return cls(
            summary=AttemptSummary.model_validate(data["summary"]),
            detail=[QuestionResult.from_dict(row) for row in data.get("detail", [])],
            breakdowns={
                k: [BreakdownRow.model_validate(row) for row in v]
                for k, v in (data.get("breakdowns") or {}).items()
            },
        )


def breakdown(rows: Iterable[QuestionResult], key: Callable[[Question], Any]) -> list[BreakdownRow]:
    """Group rows by a question attribute, in first-seen order."""
    stats: dict[str, list[int]] = {}
    for row in rows:
        value = key(row.question)
        label = UNKNOWN_LABEL if value is None else str(value)
        total_correct = stats.setdefault(label, [0, 0])
        total_correct[0] += 1
        total_correct[1] += 1 if row.correct else 0
    return [
        BreakdownRow(label=label, total=total, correct=correct, percent=percent(correct, total))
        for label, (total, correct) in stats.items()
    ]


def time_breakdown(rows: list[QuestionResult]) -> list[BreakdownRow]:
    result = []
    for label, in_band in TIME_BANDS:
        members = [row for row in rows if in_band(row.time_spent)]
        correct = sum(1 for row in members if row.correct)
        result.append(BreakdownRow(label=label, total=len(members), correct=correct, percent=percent(correct, len(members))))
    return result


def score_attempt(attempt: AttemptState, partial_credit: bool = False, passing_score: int = 70) -> ScoredAttempt:
    """
    Score every question of an attempt.

    Args:
        attempt: Attempt with questions and responses
        partial_credit: Award fractional credit where the type supports it
        passing_score: Minimum score percent counted as a pass

    Returns:
        ScoredAttempt with summary, per-question detail and breakdowns
    """
    detail: list[QuestionResult] = []
    for question in attempt.questions:
        response = attempt.responses.get(question.id)
        result = score_question(question, response, partial_credit=partial_credit)
        detail.append(
            QuestionResult(
                question=question,
                response=response,
                correct=result.correct,
                earned=result.earned,
                time_spent=attempt.time_spent.get(question.id, 0),
                flagged=bool(attempt.flags.get(question.id)),
            )
        )

    total_earned = sum(row.earned for row in detail)
    score_percent = percent(total_earned, len(detail))
    breakdowns = {
        "domain": breakdown(detail, lambda q: q.domain_name),
        "type": breakdown(detail, lambda q: q.type),
        "difficulty": breakdown(detail, lambda q: q.difficulty),
        "time": time_breakdown(detail),
    }
    summary = AttemptSummary(
        attempt_id=attempt.attempt_id,
        mode=attempt.mode,
        seed=attempt.seed,
        score_percent=score_percent,
        passed=score_percent >= passing_score,
        total_earned=total_earned,
        question_count=len(detail),
        time_used=attempt.elapsed_seconds,
        domain_breakdown=breakdowns["domain"],
        type_breakdown=breakdowns["type"],
        difficulty_breakdown=breakdowns["difficulty"],
    )
    return ScoredAttempt(summary=summary, detail=detail, breakdowns=breakdowns)
