"""
Practice settings and blueprint.

Defines the five practice modes and the learner-facing settings that the
persistence collaborator stores between runs:
1. Timed Exam - scored at the end, time limited
2. Untimed Study - feedback after each question
3. Math Drills - numeric-heavy, streak tracking
4. Domain Focus - only the selected domains
5. Weakness Mode - biased toward historically weak areas
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class PracticeMode(str, Enum):
    """Practice mode for an attempt."""

    TIMED = "timed"
    STUDY = "study"
    DRILLS = "drills"
    DOMAIN = "domain"
    WEAKNESS = "weakness"


@dataclass(frozen=True)
class ModeConfig:
    label: str
    feedback: bool
    time_limited: bool


MODE_CONFIG: dict[PracticeMode, ModeConfig] = {
    PracticeMode.TIMED: ModeConfig("Timed Exam", feedback=False, time_limited=True),
    PracticeMode.STUDY: ModeConfig("Untimed Study", feedback=True, time_limited=False),
    PracticeMode.DRILLS: ModeConfig("Math Drills", feedback=True, time_limited=False),
    PracticeMode.DOMAIN: ModeConfig("Domain Focus", feedback=True, time_limited=True),
    PracticeMode.WEAKNESS: ModeConfig("Weakness Mode", feedback=True, time_limited=True),
}


def mode_config(mode: str | PracticeMode) -> ModeConfig:
    """Config for a mode; unknown modes behave like untimed study."""
    try:
        return MODE_CONFIG[PracticeMode(mode)]
    except ValueError:
        return ModeConfig(str(mode), feedback=True, time_limited=False)


# Drills replace the whole type mix (~80% numeric + multi-part numeric).
DRILL_TYPE_MIX: dict[str, float] = {
    "numeric": 0.6,
    "multi_numeric": 0.2,
    "mcq": 0.1,
    "msq": 0.05,
    "fill": 0.05,
    "order": 0.0,
    "match": 0.0,
}


class Blueprint(BaseModel):
    """Desired question counts and weight distributions for attempts."""

    question_count: dict[str, int] = Field(
        default_factory=lambda: {"timed": 30, "study": 20, "drills": 20, "domain": 20, "weakness": 20}
    )
    time_limit_minutes: int = 60
    domain_weights: dict[int, float] = Field(
        default_factory=lambda: {1: 0.2, 2: 0.35, 3: 0.2, 4: 0.15, 5: 0.1}
    )
    difficulty_mix: dict[str, float] = Field(
        default_factory=lambda: {"easy": 0.4, "medium": 0.4, "hard": 0.2}
    )
    type_mix: dict[str, float] = Field(
        default_factory=lambda: {
            "mcq": 0.35,
            "msq": 0.15,
            "numeric": 0.3,
            "fill": 0.05,
            "order": 0.05,
            "match": 0.05,
            "multi_numeric": 0.05,
        }
    )

    def count_for(self, mode: str | PracticeMode, default: int = 20) -> int:
        key = mode.value if isinstance(mode, PracticeMode) else str(mode)
        return self.question_count.get(key) or default

    def for_mode(self, mode: str | PracticeMode) -> Blueprint:
        """Deep copy for one attempt, with the drills type mix applied."""
        copy = self.model_copy(deep=True)
        if str(getattr(mode, "value", mode)) == PracticeMode.DRILLS.value:
            copy.type_mix = dict(DRILL_TYPE_MIX)
        return copy


class PracticeSettings(BaseModel):
    """Learner settings persisted between runs."""

    mode: PracticeMode = PracticeMode.TIMED
    enabled_packs: list[str] = Field(default_factory=lambda: ["core"])
    fun_mode: bool = False
    partial_credit: bool = False
    blueprint: Blueprint = Field(default_factory=Blueprint)
