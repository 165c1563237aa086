"""
Base contract and helpers for template generators.

A generator is split in two:
- draw(params, rng): pull every random input from the attempt RNG into a
  plain `variant` dict
- solve(variant): pure arithmetic from the variant to a GeneratedBody

generate() is draw() followed by solve(), so re-solving a returned variant
reproduces the answer and the worked steps exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from payprep.core.rng import SeededRng

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round half-up to cents."""
    return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def fmt_money(value: float) -> str:
    """Format as dollars with two decimals, e.g. $950.00."""
    return f"${Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP)}"


def fmt_number(value: float) -> str:
    """Drop a trailing .0 from whole floats (1.5 stays 1.5, 2.0 becomes 2)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class GeneratedBody:
    """Output of a template generator before it is merged into a Question."""

    prompt: str
    answer: Any = None
    tolerance: float | None = None
    relative_tolerance: float | None = None
    unit_hint: str | None = None
    choices: list[str] | None = None
    items: list[str] | None = None
    left: list[str] | None = None
    right: list[str] | None = None
    correct_order: list[int] | None = None
    explanation: str | None = None
    steps: list[str] | None = None
    variant: dict[str, Any] | None = None


class TemplateGenerator:
    """Base generator. Subclasses override draw() and solve()."""

    template_id: str = ""
    defaults: dict[str, Any] = {}

    def param(self, params: dict[str, Any], key: str) -> Any:
        """Read a generator parameter, falling back to the class defaults."""
        value = params.get(key)
        return self.defaults.get(key) if value is None else value

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        raise NotImplementedError

    def generate(self, params: dict[str, Any], rng: SeededRng) -> GeneratedBody:
        variant = self.draw(params, rng)
        body = self.solve(variant)
        if body.variant is None and variant:
            body.variant = variant
        return body
