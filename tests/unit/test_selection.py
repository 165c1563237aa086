"""
Unit tests for the selection engine.
"""

import pytest

from payprep.adaptive.weakness import WeakSpot, WeaknessProfile
from payprep.content.models import PoolEntry
from payprep.core.exceptions import EmptyPoolError
from payprep.core.rng import SeededRng
from payprep.core.settings import DRILL_TYPE_MIX, Blueprint, PracticeMode
from payprep.selection import SelectionEngine, apply_mode_weights, select_questions


class TestApplyModeWeights:
    """Mode adjustments never mutate the input blueprint."""

    def test_domain_focus(self):
        blueprint = Blueprint()
        adjusted = apply_mode_weights(blueprint, PracticeMode.DOMAIN, domain_selection=[3])

        assert adjusted.domain_weights == {1: 0.0, 2: 0.0, 3: 1.0, 4: 0.0, 5: 0.0}
        assert blueprint.domain_weights[3] == 0.2

    def test_domain_focus_without_selection_is_unchanged(self):
        blueprint = Blueprint()
        assert apply_mode_weights(blueprint, "domain").domain_weights == blueprint.domain_weights

    def test_drills_type_mix(self):
        adjusted = apply_mode_weights(Blueprint(), "drills")
        assert adjusted.type_mix == DRILL_TYPE_MIX

    def test_weakness_never_lowers(self):
        blueprint = Blueprint()
        profile = WeaknessProfile(
            domains=[WeakSpot(id=5, weight=0.5), WeakSpot(id=2, weight=0.1)],
            types=[WeakSpot(id="match", weight=0.4)],
            difficulties=[WeakSpot(id="hard", weight=0.3)],
        )
        adjusted = apply_mode_weights(blueprint, "weakness", weakness_profile=profile)

        for key, weight in blueprint.domain_weights.items():
            assert adjusted.domain_weights[key] >= weight
        assert adjusted.domain_weights[5] == 0.5
        assert adjusted.domain_weights[2] == 0.35
        assert adjusted.type_mix["match"] == 0.4
        assert adjusted.difficulty_mix["hard"] == 0.3

    def test_other_modes_untouched(self):
        blueprint = Blueprint()
        assert apply_mode_weights(blueprint, "timed") == blueprint


class TestSelectQuestions:
    """End-to-end selection over a static pool."""

    def test_reproducible(self, static_pool):
        first = select_questions(static_pool, SeededRng("seed-1"), Blueprint(), "study")
        second = select_questions(static_pool, SeededRng("seed-1"), Blueprint(), "study")
        assert [q.id for q in first] == [q.id for q in second]

    def test_count_from_blueprint(self, static_pool):
        blueprint = Blueprint(question_count={"study": 12})
        questions = select_questions(static_pool, SeededRng("c"), blueprint, "study")
        assert len(questions) == 12

    def test_default_count(self, static_pool):
        blueprint = Blueprint(question_count={})
        questions = select_questions(static_pool, SeededRng("c"), blueprint, "study", default_count=5)
        assert len(questions) == 5

    def test_unique_ids(self, static_pool):
        questions = select_questions(static_pool, SeededRng("u"), Blueprint(), "study")
        ids = [q.id for q in questions]
        assert len(ids) == len(set(ids))

    def test_domain_focus_only_selected(self, static_pool):
        blueprint = Blueprint(question_count={"domain": 4})
        questions = select_questions(static_pool, SeededRng("d"), blueprint, "domain", domain_selection=[4])
        assert {q.domain for q in questions} == {4}

    def test_empty_pool(self):
        with pytest.raises(EmptyPoolError):
            select_questions([], SeededRng("e"), Blueprint(), "timed")

    def test_small_static_pool_drops_colliding_slots(self, entry_factory):
        pool = [PoolEntry("test", entry_factory(id="only-one"))]
        questions = select_questions(pool, SeededRng("x"), Blueprint(question_count={"study": 3}), "study")
        assert [q.id for q in questions] == ["only-one"]

    def test_template_pool_fills_every_slot(self, entry_factory):
        pool = [PoolEntry("test", entry_factory(type="numeric", domain=2, template_id="net_pay_v1"))]
        questions = select_questions(pool, SeededRng("t"), Blueprint(question_count={"drills": 6}), "drills")
        assert len(questions) == 6
        assert len({q.id for q in questions}) == 6

    def test_bundled_content(self, bundled_library):
        pool = bundled_library.build_pool(["core"])
        questions = select_questions(pool, SeededRng("bundled"), Blueprint(), "timed")
        assert len(questions) == 30
        assert all(q.prompt for q in questions)


class TestSelectionEngine:
    """Candidate tiers and duplicate handling."""

    def test_empty_pool_raises(self):
        with pytest.raises(EmptyPoolError):
            SelectionEngine([], SeededRng("e"))

    def test_exact_match_preferred(self, entry_factory):
        pool = [
            PoolEntry("t", entry_factory(id="a", domain=1, difficulty="easy", type="mcq")),
            PoolEntry("t", entry_factory(id="b", domain=1, difficulty="hard", type="fill")),
            PoolEntry("t", entry_factory(id="c", domain=2, difficulty="easy", type="mcq")),
        ]
        blueprint = Blueprint(
            domain_weights={1: 1.0},
            difficulty_mix={"hard": 1.0},
            type_mix={"fill": 1.0},
        )
        questions = SelectionEngine(pool, SeededRng("x")).select(blueprint, 1)
        assert [q.id for q in questions] == ["b"]

    def test_falls_back_to_whole_pool(self, entry_factory):
        pool = [PoolEntry("t", entry_factory(id="only", domain=5))]
        blueprint = Blueprint(domain_weights={1: 1.0})
        questions = SelectionEngine(pool, SeededRng("x")).select(blueprint, 1)
        assert [q.id for q in questions] == ["only"]

    def test_static_entry_not_reused(self, entry_factory):
        pool = [
            PoolEntry("t", entry_factory(id="a", domain=1)),
            PoolEntry("t", entry_factory(id="b", domain=1)),
        ]
        blueprint = Blueprint(domain_weights={1: 1.0})
        questions = SelectionEngine(pool, SeededRng("reuse")).select(blueprint, 2)
        assert sorted(q.id for q in questions) == ["a", "b"]

    @pytest.mark.parametrize("seed", ["s1", "s2", "s3", "s4", "s5", "s6"])
    def test_duplicate_id_slot_retried(self, entry_factory, seed):
        pool = [
            PoolEntry("t", entry_factory(id="dup", domain=1)),
            PoolEntry("t", entry_factory(id="dup", domain=1, prompt="same id, other entry")),
            PoolEntry("t", entry_factory(id="other", domain=1)),
        ]
        blueprint = Blueprint(domain_weights={1: 1.0})
        questions = SelectionEngine(pool, SeededRng(seed)).select(blueprint, 2)
        assert sorted(q.id for q in questions) == ["dup", "other"]
