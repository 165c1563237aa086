"""
Attempt lifecycle: state, scoring and reporting.
"""

from .report import build_report, review_item
from .results import (
    AttemptSummary,
    BreakdownRow,
    QuestionResult,
    ScoredAttempt,
    percent,
    score_attempt,
)
from .state import (
    STATUS_COMPLETE,
    STATUS_IN_PROGRESS,
    AttemptState,
    new_attempt_id,
    retake_attempt,
)

__all__ = [
    "STATUS_COMPLETE",
    "STATUS_IN_PROGRESS",
    "AttemptState",
    "AttemptSummary",
    "BreakdownRow",
    "QuestionResult",
    "ScoredAttempt",
    "build_report",
    "new_attempt_id",
    "percent",
    "retake_attempt",
    "review_item",
    "score_attempt",
]
