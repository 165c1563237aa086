"""
Weakness Profiler.

Averages per-label percent-correct across recent attempt summaries and keeps
the lowest-scoring domains, types and difficulties. The resulting profile is
merged into blueprint weights with max(), so it can raise a weight but never
lower one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger
from pydantic import BaseModel, Field

from payprep.attempt.results import AttemptSummary, BreakdownRow
from payprep.core.models import FALLBACK_DOMAIN, domain_id_for_name
from payprep.core.settings import Blueprint

MAX_HISTORY = 10

WEAK_DOMAIN_COUNT = 3
WEAK_TYPE_COUNT = 3
WEAK_DIFFICULTY_COUNT = 2

# Boost weights; kept below 1 so a weak area is boosted, not made exclusive.
DOMAIN_WEIGHT = 0.5
TYPE_WEIGHT = 0.4
DIFFICULTY_WEIGHT = 0.3


class WeakSpot(BaseModel):
    id: int | str
    weight: float


class WeaknessProfile(BaseModel):
    """Ranked weak areas, worst first."""

    domains: list[WeakSpot] = Field(default_factory=list)
    types: list[WeakSpot] = Field(default_factory=list)
    difficulties: list[WeakSpot] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.domains or self.types or self.difficulties)

    def merge_into(self, blueprint: Blueprint) -> Blueprint:
        """Copy of `blueprint` with each weak area's weight raised to at least its boost."""
        merged = blueprint.model_copy(deep=True)
        merged.domain_weights = merge_weights(merged.domain_weights, ((int(s.id), s.weight) for s in self.domains))
        merged.type_mix = merge_weights(merged.type_mix, ((str(s.id), s.weight) for s in self.types))
        merged.difficulty_mix = merge_weights(
            merged.difficulty_mix, ((str(s.id), s.weight) for s in self.difficulties)
        )
        return merged


def merge_weights(weights: Mapping, boosts: Iterable[tuple[object, float]]) -> dict:
    merged = dict(weights)
    for key, weight in boosts:
        merged[key] = max(merged.get(key, 0) or 0, weight)
    return merged


def _worst_labels(rows_per_attempt: Iterable[list[BreakdownRow]], count: int) -> list[str]:
    scores: dict[str, list[int]] = {}
    for rows in rows_per_attempt:
        for row in rows:
            scores.setdefault(row.label, []).append(row.percent)
    averages = [(label, sum(values) / len(values)) for label, values in scores.items()]
    # sorted() is stable: ties keep first-seen order
    averages.sort(key=lambda item: item[1])
    return [label for label, _ in averages[:count]]


def compute_weakness_profile(history: Iterable[AttemptSummary]) -> WeaknessProfile | None:
    """
    Build a weakness profile from recent attempt summaries.

    Args:
        history: Attempt summaries, most recent first; only the first 10 count

    Returns:
        WeaknessProfile, or None when history is empty (callers keep the prior profile)
    """
    recent = list(history)[:MAX_HISTORY]
    if not recent:
        return None

    domain_labels = _worst_labels((a.domain_breakdown for a in recent), WEAK_DOMAIN_COUNT)
    type_labels = _worst_labels((a.type_breakdown for a in recent), WEAK_TYPE_COUNT)
    difficulty_labels = _worst_labels((a.difficulty_breakdown for a in recent), WEAK_DIFFICULTY_COUNT)

    profile = WeaknessProfile(
        domains=[
            WeakSpot(id=domain_id_for_name(label, default=FALLBACK_DOMAIN), weight=DOMAIN_WEIGHT)
            for label in domain_labels
        ],
        types=[WeakSpot(id=label, weight=TYPE_WEIGHT) for label in type_labels],
        difficulties=[WeakSpot(id=label, weight=DIFFICULTY_WEIGHT) for label in difficulty_labels],
    )
    logger.info(
        f"Weakness profile from {len(recent)} attempts: domains={[s.id for s in profile.domains]} "
        f"types={[s.id for s in profile.types]} difficulties={[s.id for s in profile.difficulties]}"
    )
    return profile
