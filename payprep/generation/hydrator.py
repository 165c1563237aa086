"""
Question Hydrator.

Turns a pool entry into a self-contained Question. Template entries run
their generator against the attempt RNG; generated fields take precedence
over the entry's static fields, and the entry fills in everything else.
Static entries pass through unchanged apart from pack/domain metadata.
"""

from __future__ import annotations

from loguru import logger

from payprep.content.models import PoolEntry, TemplateEntry
from payprep.core.models import Question, domain_name
from payprep.core.rng import SeededRng

from . import get_generator

MISSING_GENERATOR_PROMPT = "Template generator missing."
MISSING_GENERATOR_EXPLANATION = "No generator available."

# Suffix range for generated question ids.
ID_SUFFIX_RANGE = 1_000_000


def _first(*values):
    """First value that is not None (and not empty for text)."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value:
            continue
        return value
    return None


def hydrate_question(pool_entry: PoolEntry, rng: SeededRng, index: int) -> Question:
    """
    Build the Question for one slot of an attempt.

    Args:
        pool_entry: Candidate chosen by the selection engine
        rng: The attempt RNG (advanced by template generators)
        index: Slot index, part of generated question ids

    Returns:
        Question with no remaining reference to the generator registry
    """
    entry = pool_entry.entry
    if entry.is_template:
        return _hydrate_template(pool_entry.pack_id, entry, rng, index)
    return _hydrate_static(pool_entry.pack_id, entry, index)


def _hydrate_template(pack_id: str, entry: TemplateEntry, rng: SeededRng, index: int) -> Question:
    generator = get_generator(entry.template_id)
    if generator is None:
        logger.warning(f"No generator registered for template {entry.template_id!r}; using placeholder")
        return Question(
            id=f"{entry.template_id}:{index}",
            pack_id=pack_id,
            domain=entry.domain,
            domain_name=domain_name(entry.domain),
            difficulty=entry.difficulty,
            type=entry.type,
            template_id=entry.template_id,
            prompt=MISSING_GENERATOR_PROMPT,
            explanation=MISSING_GENERATOR_EXPLANATION,
            tags=list(entry.tags),
        )

    body = generator.generate(entry.params, rng)
    suffix = int(rng.next() * ID_SUFFIX_RANGE)
    return Question(
        id=f"{entry.template_id}:{index}:{suffix}",
        pack_id=pack_id,
        domain=entry.domain,
        domain_name=domain_name(entry.domain),
        difficulty=entry.difficulty,
        type=entry.type,
        template_id=entry.template_id,
        prompt=body.prompt,
        choices=_first(body.choices, entry.choices),
        answer=_first(body.answer, entry.answer),
        tolerance=_first(body.tolerance, entry.tolerance),
        relative_tolerance=_first(body.relative_tolerance, entry.relative_tolerance),
        unit_hint=_first(body.unit_hint, entry.unit_hint),
        acceptable=entry.acceptable,
        items=_first(body.items, entry.items),
        left=_first(body.left, entry.left),
        right=_first(body.right, entry.right),
        correct_order=_first(body.correct_order, entry.correct_order),
        explanation=_first(body.explanation, entry.explanation) or "",
        steps=_first(body.steps, entry.steps),
        tags=list(entry.tags),
        fun_only=entry.fun_only,
        variant=body.variant,
    )


def _hydrate_static(pack_id: str, entry: TemplateEntry, index: int) -> Question:
    return Question(
        id=entry.id or f"{pack_id}:{index}",
        pack_id=pack_id,
        domain=entry.domain,
        domain_name=domain_name(entry.domain),
        difficulty=entry.difficulty,
        type=entry.type,
        prompt=entry.prompt or "",
        choices=entry.choices,
        answer=entry.answer,
        tolerance=entry.tolerance,
        relative_tolerance=entry.relative_tolerance,
        unit_hint=entry.unit_hint,
        acceptable=entry.acceptable,
        items=entry.items,
        left=entry.left,
        right=entry.right,
        correct_order=entry.correct_order,
        explanation=entry.explanation or "",
        steps=entry.steps,
        tags=list(entry.tags),
        fun_only=entry.fun_only,
    )
