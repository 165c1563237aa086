"""
Unit tests for the weakness profiler.
"""

from payprep.adaptive.weakness import (
    DIFFICULTY_WEIGHT,
    DOMAIN_WEIGHT,
    TYPE_WEIGHT,
    WeakSpot,
    WeaknessProfile,
    compute_weakness_profile,
)
from payprep.attempt.results import AttemptSummary, BreakdownRow
from payprep.core.settings import Blueprint


def row(label: str, percent: int) -> BreakdownRow:
    return BreakdownRow(label=label, total=10, correct=percent // 10, percent=percent)


def summary(domains=(), types=(), difficulties=(), attempt_id="a") -> AttemptSummary:
    return AttemptSummary(
        attempt_id=attempt_id,
        mode="timed",
        seed="s",
        score_percent=50,
        passed=False,
        total_earned=5,
        question_count=10,
        domain_breakdown=[row(label, pct) for label, pct in domains],
        type_breakdown=[row(label, pct) for label, pct in types],
        difficulty_breakdown=[row(label, pct) for label, pct in difficulties],
    )


class TestComputeWeaknessProfile:
    """Ranking, weights and label mapping."""

    def test_empty_history(self):
        assert compute_weakness_profile([]) is None

    def test_worst_labels_per_dimension(self):
        history = [
            summary(
                domains=[
                    ("Payroll Fundamentals", 90),
                    ("Calculations", 40),
                    ("Compliance", 60),
                    ("Systems & Controls", 20),
                    ("Reporting & Ethics", 80),
                ],
                types=[("mcq", 90), ("numeric", 30), ("fill", 50), ("order", 10)],
                difficulties=[("easy", 90), ("medium", 60), ("hard", 20)],
            )
        ]
        profile = compute_weakness_profile(history)

        assert [s.id for s in profile.domains] == [4, 2, 3]
        assert [s.id for s in profile.types] == ["order", "numeric", "fill"]
        assert [s.id for s in profile.difficulties] == ["hard", "medium"]
        assert {s.weight for s in profile.domains} == {DOMAIN_WEIGHT}
        assert {s.weight for s in profile.types} == {TYPE_WEIGHT}
        assert {s.weight for s in profile.difficulties} == {DIFFICULTY_WEIGHT}

    def test_averages_across_attempts(self):
        history = [
            summary(types=[("mcq", 100), ("numeric", 0)]),
            summary(types=[("mcq", 0), ("numeric", 80)]),
        ]
        profile = compute_weakness_profile(history)
        # numeric averages 40, mcq 50
        assert [s.id for s in profile.types] == ["numeric", "mcq"]

    def test_only_ten_most_recent_count(self):
        recent = [summary(types=[("mcq", 100), ("fill", 90)]) for _ in range(10)]
        old = [summary(types=[("order", 0)]) for _ in range(5)]
        profile = compute_weakness_profile(recent + old)
        assert "order" not in [s.id for s in profile.types]

    def test_unknown_domain_label_maps_to_default(self):
        profile = compute_weakness_profile([summary(domains=[("Astrology", 10)])])
        assert [s.id for s in profile.domains] == [2]


class TestMergeInto:
    """Profile merge uses max() and copies the blueprint."""

    def test_raises_but_never_lowers(self):
        blueprint = Blueprint()
        profile = WeaknessProfile(
            domains=[WeakSpot(id=1, weight=0.5), WeakSpot(id=2, weight=0.5)],
            types=[WeakSpot(id="mcq", weight=0.4), WeakSpot(id="order", weight=0.4)],
            difficulties=[WeakSpot(id="easy", weight=0.3)],
        )
        merged = profile.merge_into(blueprint)

        assert merged.domain_weights[1] == 0.5
        assert merged.domain_weights[2] == 0.5
        assert merged.type_mix["mcq"] == 0.4
        assert merged.type_mix["order"] == 0.4
        assert merged.difficulty_mix["easy"] == 0.4
        assert blueprint.type_mix["order"] == 0.05

    def test_empty_profile(self):
        assert WeaknessProfile().is_empty
        assert WeaknessProfile().merge_into(Blueprint()) == Blueprint()
