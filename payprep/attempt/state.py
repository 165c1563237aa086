"""
Attempt state.

An AttemptState is the in-progress record of one practice attempt: the
frozen question list plus everything the learner has done to it. It is a
plain dataclass so it can be snapshotted to JSON and resumed later.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from payprep.core.models import Question
from payprep.core.settings import PracticeMode, mode_config
from payprep.scoring import score_question

from .results import ScoredAttempt

STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETE = "complete"

RETAKE_STATUSES = ("incorrect", "correct", "flagged")


def new_attempt_id() -> str:
    return f"attempt_{int(time.time() * 1000)}"


@dataclass
class AttemptState:
    """Serializable state of one attempt."""

    attempt_id: str
    seed: str
    mode: str
    questions: list[Question]
    started_at: str  # ISO format
    status: str = STATUS_IN_PROGRESS
    time_limit_seconds: int | None = None
    elapsed_seconds: int = 0

    # Learner input, keyed by question id
    responses: dict[str, Any] = field(default_factory=dict)
    flags: dict[str, bool] = field(default_factory=dict)
    answer_changes: dict[str, int] = field(default_factory=dict)
    hint_usage: dict[str, int] = field(default_factory=dict)
    time_spent: dict[str, int] = field(default_factory=dict)

    # Drills
    streak: int = 0
    best_streak: int = 0

    current_index: int = 0
    blueprint: dict[str, Any] = field(default_factory=dict)
    domain_selection: list[int] = field(default_factory=list)

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if self.responses.get(q.id) is not None)

    def question_by_id(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def record_response(self, question_id: str, response: Any) -> None:
        """Store a response; replacing a different earlier one counts as an answer change."""
        previous = self.responses.get(question_id)
        if previous is not None and previous != response:
            self.answer_changes[question_id] = self.answer_changes.get(question_id, 0) + 1
        self.responses[question_id] = response

    def toggle_flag(self, question_id: str) -> bool:
        """Flip the review flag for a question; returns the new value."""
        flagged = not self.flags.get(question_id, False)
        self.flags[question_id] = flagged
        return flagged

    def use_hint(self, question_id: str) -> int:
        """Count one hint request; returns how many hints this question has used."""
        self.hint_usage[question_id] = self.hint_usage.get(question_id, 0) + 1
        return self.hint_usage[question_id]

    def go_to(self, index: int) -> int:
        """Move to a question, clamped to the valid range."""
        if not self.questions:
            self.current_index = 0
        else:
            self.current_index = min(max(int(index), 0), len(self.questions) - 1)
        return self.current_index

    def advance(self, partial_credit: bool = False) -> int:
        """Move to the next question, updating the drill streak in drills mode."""
        if self.mode == PracticeMode.DRILLS.value:
            self.update_streak(partial_credit=partial_credit)
        return self.go_to(self.current_index + 1)

    def update_streak(self, partial_credit: bool = False) -> int:
        """Extend the streak when the current question is answered correctly, else reset it."""
        question = self.current_question
        if question is None:
            return self.streak
        result = score_question(question, self.responses.get(question.id), partial_credit=partial_credit)
        if result.correct:
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
        else:
            self.streak = 0
        return self.streak

    def tick(self, seconds: int = 1) -> bool:
        """
        Advance the clock.

        Adds to elapsed time and to the time spent on the current question.

        Returns:
            True when a time-limited attempt has run out of time
        """
        self.elapsed_seconds += seconds
        question = self.current_question
        if question is not None:
            self.time_spent[question.id] = self.time_spent.get(question.id, 0) + seconds
        return self.is_expired()

    def remaining_seconds(self) -> int | None:
        """Seconds left, None for attempts without a time limit."""
        if not self.time_limit_seconds or not mode_config(self.mode).time_limited:
            return None
        return max(self.time_limit_seconds - self.elapsed_seconds, 0)

    def is_expired(self) -> bool:
        remaining = self.remaining_seconds()
        return remaining is not None and remaining <= 0

    def mark_complete(self) -> None:
        self.status = STATUS_COMPLETE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "attempt_id": self.attempt_id,
            "seed": self.seed,
            "mode": self.mode,
            "questions": [q.to_dict() for q in self.questions],
            "started_at": self.started_at,
            "status": self.status,
            "time_limit_seconds": self.time_limit_seconds,
            "elapsed_seconds": self.elapsed_seconds,
            "responses": dict(self.responses),
            "flags": dict(self.flags),
            "answer_changes": dict(self.answer_changes),
            "hint_usage": dict(self.hint_usage),
            "time_spent": dict(self.time_spent),
            "streak": self.streak,
            "best_streak": self.best_streak,
            "current_index": self.current_index,
            "blueprint": dict(self.blueprint),
            "domain_selection": list(self.domain_selection),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttemptState:
        """Create from dictionary, clamping the saved position to the question range."""
        if not isinstance(data, dict):
            raise TypeError(f"Attempt snapshot must be an object, got {type(data).__name__}")
        data = dict(data)
        data["questions"] = [Question.from_dict(q) for q in data.get("questions", [])]
        attempt = cls(**data)
        attempt.go_to(attempt.current_index)
        return attempt


def retake_attempt(
    scored: ScoredAttempt,
    status: str,
    seed: str,
    time_limit_seconds: int | None = None,
) -> AttemptState | None:
    """
    New attempt over a subset of a scored attempt's questions.

    Args:
        scored: The finished attempt
        status: 'incorrect', 'correct' or 'flagged'
        seed: Seed recorded on the new attempt
        time_limit_seconds: Limit for the retake, None for untimed

    Returns:
        Fresh AttemptState reusing the same Question objects, or None when
        no question matches the status
    """
    if status not in RETAKE_STATUSES:
        raise ValueError(f"Unknown retake status: {status!r}")
    questions = [row.question for row in scored.filter(status)]
    if not questions:
        return None
    return AttemptState(
        attempt_id=new_attempt_id(),
        seed=seed,
        mode=scored.summary.mode,
        questions=questions,
        started_at=datetime.now().isoformat(),
        time_limit_seconds=time_limit_seconds,
    )
