"""
Weighted Target Allocator.

Turns a weight map into integer per-key counts that sum exactly to a total:
floor(weight * total) per key, then the remainder handed out one unit at a
time to keys drawn from the attempt RNG.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Mapping
from typing import TypeVar

from payprep.core.rng import SeededRng

K = TypeVar("K", bound=Hashable)


def ordered_keys(weights: Mapping[K, float], order: Iterable[K] = ()) -> list[K]:
    """
    Keys of `weights` in a stable order.

    Keys listed in `order` come first (in that order); any others follow,
    sorted by their string form.
    """
    preferred = [key for key in order if key in weights]
    seen = set(preferred)
    extras = sorted((key for key in weights if key not in seen), key=str)
    return preferred + extras


def build_weighted_targets(
    weights: Mapping[K, float],
    total: int,
    rng: SeededRng,
    order: Iterable[K] = (),
) -> dict[K, int]:
    """
    Allocate `total` units across the keys of `weights`.

    Weights need not sum to 1. When they sum to more than 1 they are scaled
    down first so the floors never overshoot `total`.

    Args:
        weights: Non-negative weight per key
        total: Units to allocate (>= 0)
        rng: Attempt RNG used for the remainder draw
        order: Preferred key order for the result

    Returns:
        Count per key (same keys as `weights`) summing to `total`;
        an empty dict when `weights` is empty.

    Example:
        >>> build_weighted_targets({"easy": 0.4, "medium": 0.4, "hard": 0.2}, 10, rng)
        {'easy': 4, 'medium': 4, 'hard': 2}
    """
    keys = ordered_keys(weights, order)
    if not keys:
        return {}

    clean = {key: max(float(weights[key] or 0), 0.0) for key in keys}
    weight_sum = sum(clean.values())
    scale = 1.0 / weight_sum if weight_sum > 1 else 1.0

    counts = {key: math.floor(clean[key] * scale * total) for key in keys}
    assigned = sum(counts.values())

    # Remainder goes to weighted keys only, so zeroed keys stay at zero.
    eligible = [key for key in keys if clean[key] > 0] or keys
    while assigned < total:
        counts[rng.pick(eligible)] += 1
        assigned += 1
    return counts
