"""
Systems & controls templates: register reconciliation, variance triage and
the fixed-layout ordering and matching items.
"""

from __future__ import annotations

from typing import Any

from payprep.core.rng import SeededRng
from payprep.generation import register
from payprep.generation.base import GeneratedBody, TemplateGenerator, fmt_money, round_money


@register("reconciliation_v1")
class Reconciliation(TemplateGenerator):
    """Sum a list of register line items."""

    defaults = {"item_min": 3, "item_max": 6, "amount_min": 100, "amount_max": 2500}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        count = rng.int_between(self.param(params, "item_min"), self.param(params, "item_max"))
        low, high = self.param(params, "amount_min"), self.param(params, "amount_max")
        return {"amounts": [rng.int_between(low, high) for _ in range(count)]}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        amounts = variant["amounts"]
        total = sum(amounts)
        listed = ", ".join(f"${amount}" for amount in amounts)
        return GeneratedBody(
            prompt=f"Reconcile the payroll register by summing: {listed}. What is the total?",
            answer=round_money(total),
            tolerance=0.01,
            unit_hint="$",
            steps=[
                "Sum all line items.",
                f"{' + '.join(str(a) for a in amounts)} = {fmt_money(total)}",
            ],
            variant={"amounts": list(amounts)},
        )


@register("variance_detective_v1")
class VarianceDetective(TemplateGenerator):
    """Pick the first audit step for an unexplained payroll expense increase."""

    defaults = {"variance_min": 500, "variance_max": 15000}

    CHOICES = [
        "Validate variance with reports and approvals",
        "Ignore it",
        "Delete prior period data",
        "Delay payroll",
    ]

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {"variance": rng.int_between(self.param(params, "variance_min"), self.param(params, "variance_max"))}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        return GeneratedBody(
            prompt=(
                f"Payroll expense increased by ${variant['variance']} this period. "
                f"Which action is the best first step?"
            ),
            choices=list(self.CHOICES),
            answer=0,
            explanation="Validating the variance with source reports is the first audit step.",
            variant=dict(variant),
        )


@register("order_pay_stub_v1")
class OrderPayStub(TemplateGenerator):
    """Put pay stub sections in top-to-bottom order."""

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        return GeneratedBody(
            prompt="Order the pay stub sections from top to bottom.",
            items=["Employee info", "Earnings", "Taxes", "Deductions", "Net pay"],
            correct_order=[0, 1, 2, 3, 4],
        )


@register("match_tax_terms_v1")
class MatchTaxTerms(TemplateGenerator):
    """Match tax terms to their descriptions."""

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        return GeneratedBody(
            prompt="Match the tax term to its description.",
            left=["Withholding", "Taxable wages", "Exemption"],
            right=["Amount subject to tax", "Reduction allowed by policy", "Amount held from pay"],
            answer=[2, 0, 1],
        )
