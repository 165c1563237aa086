"""
Selection Engine: stratified question sampling for one attempt.

Algorithm:
    1. Adjust weights for the mode (domain focus, weakness boost, drills mix)
    2. Allocate per-key targets for domain, difficulty and type
    3. For each slot, take the first key with targets left in each dimension
    4. Find a pool candidate: exact match -> domain only -> whole pool
    5. Hydrate it; on an id collision retry the slot with another candidate
    6. Decrement the chosen target counters

All randomness comes from the attempt RNG, so the same seed, pool and
blueprint always yield the same question sequence.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from loguru import logger

from payprep.adaptive.weakness import WeaknessProfile
from payprep.content.models import PoolEntry
from payprep.core.exceptions import EmptyPoolError
from payprep.core.models import (
    DIFFICULTY_ORDER,
    DOMAIN_ORDER,
    FALLBACK_DIFFICULTY,
    FALLBACK_DOMAIN,
    FALLBACK_TYPE,
    TYPE_ORDER,
    Question,
)
from payprep.core.rng import SeededRng
from payprep.core.settings import DRILL_TYPE_MIX, Blueprint, PracticeMode
from payprep.generation.hydrator import hydrate_question

from .allocator import build_weighted_targets, ordered_keys

DEFAULT_QUESTION_COUNT = 20
DEFAULT_MAX_SLOT_ATTEMPTS = 8


def apply_mode_weights(
    blueprint: Blueprint,
    mode: str | PracticeMode,
    domain_selection: Sequence[int] = (),
    weakness_profile: WeaknessProfile | None = None,
) -> Blueprint:
    """
    Copy of `blueprint` with the mode's weight adjustments applied.

    - domain: selected domains weigh 1, every other domain 0
    - weakness: each weak area raised to max(current, boost)
    - drills: type mix replaced by the numeric-heavy drill mix
    """
    mode_value = str(getattr(mode, "value", mode))
    adjusted = blueprint.model_copy(deep=True)

    if mode_value == PracticeMode.DOMAIN.value and domain_selection:
        selected = {int(d) for d in domain_selection}
        keys = set(adjusted.domain_weights) | selected
        adjusted.domain_weights = {key: (1.0 if key in selected else 0.0) for key in keys}

    if mode_value == PracticeMode.WEAKNESS.value and weakness_profile is not None:
        adjusted = weakness_profile.merge_into(adjusted)

    if mode_value == PracticeMode.DRILLS.value:
        adjusted.type_mix = dict(DRILL_TYPE_MIX)

    return adjusted


def _first_open_key(targets: dict, order: Iterable, fallback):
    for key in ordered_keys(targets, order):
        if targets[key] > 0:
            return key
    return fallback


class SelectionEngine:
    """
    Builds the ordered question sequence for one attempt.

    Attributes:
        pool: Candidate (pack, entry) pairs
        rng: The attempt RNG
        max_slot_attempts: Hydrations tried per slot before it is dropped
    """

    def __init__(self, pool: Sequence[PoolEntry], rng: SeededRng, max_slot_attempts: int = DEFAULT_MAX_SLOT_ATTEMPTS):
        if not pool:
            raise EmptyPoolError()
        self.pool = list(pool)
        self.rng = rng
        self.max_slot_attempts = max(1, max_slot_attempts)

    def select(self, blueprint: Blueprint, total: int) -> list[Question]:
        """Select up to `total` questions against the (already adjusted) blueprint."""
        domain_targets = build_weighted_targets(blueprint.domain_weights, total, self.rng, DOMAIN_ORDER)
        difficulty_targets = build_weighted_targets(blueprint.difficulty_mix, total, self.rng, DIFFICULTY_ORDER)
        type_targets = build_weighted_targets(blueprint.type_mix, total, self.rng, TYPE_ORDER)

        picked: list[Question] = []
        used_ids: set[str] = set()
        # Static entries always hydrate to the same id; never offer one twice.
        spent: set[int] = set()

        for index in range(total):
            domain_key = _first_open_key(domain_targets, DOMAIN_ORDER, FALLBACK_DOMAIN)
            difficulty_key = _first_open_key(difficulty_targets, DIFFICULTY_ORDER, FALLBACK_DIFFICULTY)
            type_key = _first_open_key(type_targets, TYPE_ORDER, FALLBACK_TYPE)
            domain_open = domain_targets.get(domain_key, 0) > 0

            filled = self._fill_slot(index, domain_key, difficulty_key, type_key, domain_open, used_ids, spent)
            if filled is not None:
                candidate, question = filled
                picked.append(question)
                used_ids.add(question.id)
                if not self.pool[candidate].entry.is_template:
                    spent.add(candidate)
            else:
                logger.warning(f"Slot {index} dropped: no candidate produced a new question id")

            for targets, key in (
                (domain_targets, domain_key),
                (difficulty_targets, difficulty_key),
                (type_targets, type_key),
            ):
                if targets.get(key, 0) > 0:
                    targets[key] -= 1

        return picked

    def _fill_slot(
        self,
        index: int,
        domain_key: int,
        difficulty_key: str,
        type_key: str,
        domain_open: bool,
        used_ids: set[str],
        spent: set[int],
    ) -> tuple[int, Question] | None:
        tried = set(spent)
        for _ in range(self.max_slot_attempts):
            candidate = self._pick_candidate(domain_key, difficulty_key, type_key, domain_open, tried)
            if candidate is None:
                return None
            tried.add(candidate)
            question = hydrate_question(self.pool[candidate], self.rng, index)
            if question.id not in used_ids:
                return candidate, question
            logger.debug(f"Slot {index}: duplicate id {question.id!r}, retrying")
        return None

    def _pick_candidate(
        self,
        domain_key: int,
        difficulty_key: str,
        type_key: str,
        domain_open: bool,
        tried: set[int],
    ) -> int | None:
        """Pool index for the slot: exact match, then domain only, then anything."""
        tiers: list[Callable[[PoolEntry], bool]] = []
        if domain_open:
            tiers.append(
                lambda item: item.entry.domain == domain_key
                and item.entry.type == type_key
                and item.entry.difficulty == difficulty_key
            )
            tiers.append(lambda item: item.entry.domain == domain_key)
        tiers.append(lambda item: True)

        for tier, predicate in enumerate(tiers):
            candidates = [i for i, item in enumerate(self.pool) if i not in tried and predicate(item)]
            if candidates:
                if tier == len(tiers) - 1 and len(tiers) > 1:
                    logger.debug(
                        f"No candidate for domain {domain_key}; falling back to the whole pool"
                    )
                return self.rng.pick(candidates)
        return None


def select_questions(
    pool: Sequence[PoolEntry],
    rng: SeededRng,
    blueprint: Blueprint,
    mode: str | PracticeMode,
    domain_selection: Sequence[int] = (),
    weakness_profile: WeaknessProfile | None = None,
    default_count: int = DEFAULT_QUESTION_COUNT,
    max_slot_attempts: int = DEFAULT_MAX_SLOT_ATTEMPTS,
) -> list[Question]:
    """
    Select the question sequence for an attempt.

    Args:
        pool: Filtered candidate pool
        rng: The attempt RNG
        blueprint: Settings blueprint (copied, never mutated)
        mode: Practice mode
        domain_selection: Domains for domain-focus mode
        weakness_profile: Profile for weakness mode
        default_count: Question count when the blueprint has none for the mode
        max_slot_attempts: Hydrations per slot before a colliding slot is dropped

    Returns:
        Ordered questions with unique ids

    Raises:
        EmptyPoolError: If the pool is empty
    """
    engine = SelectionEngine(pool, rng, max_slot_attempts=max_slot_attempts)
    adjusted = apply_mode_weights(blueprint, mode, domain_selection, weakness_profile)
    total = adjusted.count_for(mode, default=default_count)
    questions = engine.select(adjusted, total)
    logger.info(
        f"Selected {len(questions)}/{total} questions for mode {getattr(mode, 'value', mode)!r} "
        f"from a pool of {len(engine.pool)}"
    )
    return questions
