"""
Gross earnings templates: overtime, blended regular rate, earnings mixes,
rounding order and pay period conversion.
"""

from __future__ import annotations

from typing import Any

from payprep.core.rng import SeededRng
from payprep.generation import register
from payprep.generation.base import GeneratedBody, TemplateGenerator, fmt_money, fmt_number, round_money

OVERTIME_THRESHOLD_HOURS = 40


@register("overtime_gross_v1")
class OvertimeGross(TemplateGenerator):
    """Hourly gross pay with hours over 40 paid at a multiplier."""

    defaults = {"rate_min": 15, "rate_max": 45, "hours_min": 36, "hours_max": 55, "ot_multiplier": 1.5}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        rate = rng.int_between(self.param(params, "rate_min"), self.param(params, "rate_max"))
        hours = rng.int_between(self.param(params, "hours_min"), self.param(params, "hours_max"))
        return {"rate": rate, "hours": hours, "ot_multiplier": self.param(params, "ot_multiplier")}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        rate, hours, multiplier = variant["rate"], variant["hours"], variant["ot_multiplier"]
        overtime_hours = max(hours - OVERTIME_THRESHOLD_HOURS, 0)
        regular_hours = hours - overtime_hours
        regular_pay = regular_hours * rate
        overtime_pay = overtime_hours * rate * multiplier
        gross = regular_pay + overtime_pay
        return GeneratedBody(
            prompt=(
                f"An employee earns ${rate}/hour and worked {hours} hours. "
                f"Overtime is paid at {fmt_number(multiplier)}x. What is gross pay?"
            ),
            answer=round_money(gross),
            tolerance=0.02,
            unit_hint="$",
            steps=[
                f"Regular hours: {regular_hours} x ${rate} = {fmt_money(regular_pay)}",
                f"OT hours: {overtime_hours} x ${rate} x {fmt_number(multiplier)} = {fmt_money(overtime_pay)}",
                f"Gross = regular + OT = {fmt_money(gross)}",
            ],
            variant=dict(variant),
        )


@register("blended_rate_v1")
class BlendedRate(TemplateGenerator):
    """Overtime premium on a regular rate that includes a nondiscretionary bonus."""

    defaults = {"rate_min": 15, "rate_max": 35, "hours_min": 41, "hours_max": 50, "bonus_min": 50, "bonus_max": 300}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        rate = rng.int_between(self.param(params, "rate_min"), self.param(params, "rate_max"))
        hours = rng.int_between(self.param(params, "hours_min"), self.param(params, "hours_max"))
        bonus = rng.int_between(self.param(params, "bonus_min"), self.param(params, "bonus_max"))
        return {"rate": rate, "hours": hours, "bonus": bonus}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        rate, hours, bonus = variant["rate"], variant["hours"], variant["bonus"]
        regular_rate = (rate * hours + bonus) / hours
        overtime_hours = max(hours - OVERTIME_THRESHOLD_HOURS, 0)
        ot_premium = overtime_hours * (regular_rate * 0.5)
        gross = rate * hours + bonus + ot_premium
        return GeneratedBody(
            prompt=(
                f"An employee earns ${rate}/hour and worked {hours} hours with a nondiscretionary "
                f"bonus of ${bonus}. Using a blended regular rate, what is the total gross pay?"
            ),
            answer=round_money(gross),
            tolerance=0.05,
            unit_hint="$",
            steps=[
                f"Regular rate = (base earnings + bonus) / hours = {fmt_money(regular_rate)}",
                f"OT premium = OT hours x (regular rate x 0.5) = {fmt_money(ot_premium)}",
                f"Gross = base earnings + bonus + OT premium = {fmt_money(gross)}",
            ],
            variant=dict(variant),
        )


@register("earnings_mix_v1")
class EarningsMix(TemplateGenerator):
    """Regular, overtime, shift differential and a flat stipend."""

    defaults = {
        "rate_min": 15, "rate_max": 30,
        "reg_hours_min": 30, "reg_hours_max": 40,
        "ot_hours_min": 0, "ot_hours_max": 10,
        "shift_diff_min": 1, "shift_diff_max": 3,
        "stipend_min": 25, "stipend_max": 150,
    }

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        return {
            "rate": rng.int_between(self.param(params, "rate_min"), self.param(params, "rate_max")),
            "reg_hours": rng.int_between(self.param(params, "reg_hours_min"), self.param(params, "reg_hours_max")),
            "ot_hours": rng.int_between(self.param(params, "ot_hours_min"), self.param(params, "ot_hours_max")),
            "shift_diff": rng.int_between(self.param(params, "shift_diff_min"), self.param(params, "shift_diff_max")),
            "stipend": rng.int_between(self.param(params, "stipend_min"), self.param(params, "stipend_max")),
        }

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        rate = variant["rate"]
        regular = variant["reg_hours"] * rate
        overtime = variant["ot_hours"] * rate * 1.5
        shift_pay = variant["reg_hours"] * variant["shift_diff"]
        stipend = variant["stipend"]
        gross = regular + overtime + shift_pay + stipend
        return GeneratedBody(
            prompt=(
                f"Calculate gross pay: rate ${rate}/hr, {variant['reg_hours']} regular hours, "
                f"{variant['ot_hours']} OT hours at 1.5x, shift diff ${variant['shift_diff']}/hr "
                f"for regular hours, stipend ${stipend}."
            ),
            answer=round_money(gross),
            tolerance=0.05,
            unit_hint="$",
            steps=[
                f"Regular: {fmt_money(regular)}",
                f"OT: {fmt_money(overtime)}",
                f"Shift diff: {fmt_money(shift_pay)}",
                f"Stipend: {fmt_money(stipend)}",
                f"Gross: {fmt_money(gross)}",
            ],
            variant=dict(variant),
        )


@register("rounding_rule_v1")
class RoundingRule(TemplateGenerator):
    """Gross pay when each component is rounded to cents before multiplying."""

    defaults = {"rate_min": 12.0, "rate_max": 40.0, "hours_min": 20.0, "hours_max": 45.0}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        rate = round_money(rng.float_between(self.param(params, "rate_min"), self.param(params, "rate_max")))
        hours = round_money(rng.float_between(self.param(params, "hours_min"), self.param(params, "hours_max")))
        return {"rate": rate, "hours": hours}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        rate, hours = variant["rate"], variant["hours"]
        rounded_rate = round_money(rate)
        rounded_hours = round_money(hours)
        rounded_component = rounded_rate * rounded_hours
        round_at_end = round_money(rate * hours)
        return GeneratedBody(
            prompt=(
                f"An employee worked {hours} hours at ${rate}/hr. If you round each component "
                f"to 2 decimals before multiplying, what gross pay results?"
            ),
            answer=round_money(rounded_component),
            tolerance=0.02,
            unit_hint="$",
            steps=[
                f"Rounded rate: ${rounded_rate}, rounded hours: {rounded_hours}",
                f"Multiply = {fmt_money(rounded_component)} (round at end would be {fmt_money(round_at_end)}).",
            ],
            variant=dict(variant),
        )


@register("pay_period_convert_v1")
class PayPeriodConvert(TemplateGenerator):
    """Annual salary to a per-period amount."""

    defaults = {"annual_min": 30000, "annual_max": 120000, "periods": [12, 24, 26, 52]}

    def draw(self, params: dict[str, Any], rng: SeededRng) -> dict[str, Any]:
        annual = rng.int_between(self.param(params, "annual_min"), self.param(params, "annual_max"))
        period = rng.pick(self.param(params, "periods"))
        return {"annual": annual, "period": period}

    def solve(self, variant: dict[str, Any]) -> GeneratedBody:
        annual, period = variant["annual"], variant["period"]
        per_period = annual / period
        return GeneratedBody(
            prompt=(
                f"An employee earns ${annual} annually. What is the equivalent per-pay-period "
                f"amount for {period} pay periods?"
            ),
            answer=round_money(per_period),
            tolerance=0.05,
            unit_hint="$",
            steps=[
                "Annual salary ÷ pay periods.",
                f"{fmt_money(annual)} ÷ {period} = {fmt_money(per_period)}",
            ],
            variant=dict(variant),
        )
