"""
Deduction and net pay templates.
"""

from __future__ import annotations

from typing import Any

from payprep.core.rng import SeededRng
from payprep.generation import register
from payprep.generation.base import GeneratedBody, TemplateGenerator, fmt_money, round_money


@register("pretax_posttax_v1")
class PretaxPosttax(TemplateGenerator):
    """Pre-tax percent + flat deduction, then a post-tax percent of taxable wages."""

    defaults = {
        "gross_min": 1500, "gross_max": 4000,
        "pretax_perc_min": 2, "pretax_perc_max": 8,
        "pretax_flat_min": 20, "pretax_flat_max": 120,
        "posttax_perc_min": 1, "posttax_perc_max": 5,
    }

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {
            "gross": rng.int_between(self.param(params, "gross_min"), self.param(params, "gross_max")),
            "pretax_perc": rng.int_between(self.param(params, "pretax_perc_min"), self.param(params, "pretax_perc_max")),
            "pretax_flat": rng.int_between(self.param(params, "pretax_flat_min"), self.param(params, "pretax_flat_max")),
            "posttax_perc": rng.int_between(self.param(params, "posttax_perc_min"), self.param(params, "posttax_perc_max")),
        }

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        gross = variant["gross"]
        pretax = gross * (variant["pretax_perc"] / 100) + variant["pretax_flat"]
        taxable = gross - pretax
        posttax = taxable * (variant["posttax_perc"] / 100)
        net = gross - pretax - posttax
        return GeneratedBody(
            prompt=(
                f"Gross pay is ${gross}. Pre-tax deductions: {variant['pretax_perc']}% plus "
                f"${variant['pretax_flat']}. Post-tax deduction: {variant['posttax_perc']}% of "
                f"taxable wages. What is net pay?"
            ),
            answer=round_money(net),
            tolerance=0.05,
            unit_hint="$",
            steps=[
                f"Pre-tax: {fmt_money(pretax)}",
                f"Taxable wages: {fmt_money(taxable)}",
                f"Post-tax: {fmt_money(posttax)}",
                f"Net: {fmt_money(net)}",
            ],
            variant=dict(variant),
        )


@register("percent_deduction_cap_v1")
class PercentDeductionCap(TemplateGenerator):
    """Percentage deduction limited by a dollar cap."""

    defaults = {"gross_min": 1000, "gross_max": 5000, "rate_min": 2, "rate_max": 10, "cap_min": 50, "cap_max": 250}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {
            "gross": rng.int_between(self.param(params, "gross_min"), self.param(params, "gross_max")),
            "rate": rng.int_between(self.param(params, "rate_min"), self.param(params, "rate_max")),
            "cap": rng.int_between(self.param(params, "cap_min"), self.param(params, "cap_max")),
        }

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        gross, rate, cap = variant["gross"], variant["rate"], variant["cap"]
        calculated = gross * (rate / 100)
        deduction = min(calculated, cap)
        return GeneratedBody(
            prompt=(
                f"A voluntary deduction is {rate}% of gross pay, not to exceed ${cap}. "
                f"Gross pay is ${gross}. What is the deduction amount?"
            ),
            answer=round_money(deduction),
            tolerance=0.02,
            unit_hint="$",
            steps=[
                f"Calculated deduction: {fmt_money(calculated)}",
                f"Apply cap: {fmt_money(deduction)}",
            ],
            variant=dict(variant),
        )


@register("net_pay_v1")
class NetPay(TemplateGenerator):
    """Gross less a percentage tax and flat deductions."""

    defaults = {
        "gross_min": 800, "gross_max": 3000,
        "tax_rate_min": 10, "tax_rate_max": 25,
        "deduction_min": 25, "deduction_max": 200,
    }

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {
            "gross": rng.int_between(self.param(params, "gross_min"), self.param(params, "gross_max")),
            "tax_rate": rng.int_between(self.param(params, "tax_rate_min"), self.param(params, "tax_rate_max")),
            "deduction": rng.int_between(self.param(params, "deduction_min"), self.param(params, "deduction_max")),
        }

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        gross, tax_rate, deduction = variant["gross"], variant["tax_rate"], variant["deduction"]
        tax = gross * (tax_rate / 100)
        net = gross - tax - deduction
        return GeneratedBody(
            prompt=(
                f"Gross pay is ${gross}. Taxes are {tax_rate}% and deductions total ${deduction}. "
                f"What is net pay?"
            ),
            answer=round_money(net),
            tolerance=0.05,
            unit_hint="$",
            steps=[
                f"Tax: {fmt_money(tax)}",
                f"Net: {fmt_money(net)}",
            ],
            variant=dict(variant),
        )


@register("multi_numeric_breakdown_v1")
class MultiNumericBreakdown(TemplateGenerator):
    """Three-part answer: gross, tax, net."""

    defaults = {"rate_min": 15, "rate_max": 40, "hours_min": 20, "hours_max": 40, "tax_rate_min": 10, "tax_rate_max": 25}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {
            "rate": rng.int_between(self.param(params, "rate_min"), self.param(params, "rate_max")),
            "hours": rng.int_between(self.param(params, "hours_min"), self.param(params, "hours_max")),
            "tax_rate": rng.int_between(self.param(params, "tax_rate_min"), self.param(params, "tax_rate_max")),
        }

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        rate, hours, tax_rate = variant["rate"], variant["hours"], variant["tax_rate"]
        gross = rate * hours
        tax = gross * (tax_rate / 100)
        net = gross - tax
        return GeneratedBody(
            prompt=(
                f"Compute the following: (1) Gross pay for {hours} hours at ${rate}/hr, "
                f"(2) Tax at {tax_rate}%, (3) Net pay."
            ),
            answer=[round_money(gross), round_money(tax), round_money(net)],
            tolerance=0.05,
            unit_hint="$",
            steps=[
                f"Gross = hours x rate = {fmt_money(gross)}",
                f"Tax = gross x rate = {fmt_money(tax)}",
                f"Net = gross - tax = {fmt_money(net)}",
            ],
            variant=dict(variant),
        )
