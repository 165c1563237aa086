"""
Unit tests for the practice session orchestrator.
"""

from dataclasses import replace

import pytest

from payprep.core.exceptions import EmptyPoolError, PayPrepError
from payprep.core.settings import PracticeSettings
from payprep.scoring import get_handler
from payprep.session import PracticeSession, build_attempt


@pytest.fixture
def session(bundled_library, storage, app_settings):
    return PracticeSession(bundled_library, storage, app_settings)


def answer_everything_correctly(session):
    for question in session.attempt.questions:
        session.answer(get_handler(question.type).expected(question), question_id=question.id)


class TestBuildAttempt:
    """Attempt construction."""

    def test_fixed_seed_reproducible(self, bundled_library):
        prefs = PracticeSettings()
        first = build_attempt(bundled_library, prefs, "study", seed="fixed")
        second = build_attempt(bundled_library, prefs, "study", seed="fixed")

        assert first.seed == "fixed"
        assert [q.to_dict() for q in first.questions] == [q.to_dict() for q in second.questions]

    def test_time_limit_by_mode(self, bundled_library):
        prefs = PracticeSettings()
        assert build_attempt(bundled_library, prefs, "timed").time_limit_seconds == 3600
        assert build_attempt(bundled_library, prefs, "study").time_limit_seconds is None

    def test_drills_blueprint_snapshot(self, bundled_library):
        attempt = build_attempt(bundled_library, PracticeSettings(), "drills", seed="d")
        assert attempt.blueprint["type_mix"]["numeric"] == 0.6

    def test_no_enabled_packs(self, bundled_library):
        with pytest.raises(EmptyPoolError):
            build_attempt(bundled_library, PracticeSettings(enabled_packs=[]), "timed")


class TestPracticeSession:
    """Start, answer, tick, submit, retake."""

    def test_start_persists_attempt(self, session, storage):
        attempt = session.start("study")

        assert len(attempt.questions) == 20
        assert storage.load_attempt() == attempt

    def test_resume(self, session, bundled_library, storage, app_settings):
        started = session.start("timed")
        session.answer(0, question_id=started.questions[0].id)

        other = PracticeSession(bundled_library, storage, app_settings)
        resumed = other.resume()
        assert resumed.attempt_id == started.attempt_id
        assert resumed.responses == started.responses
        assert [q.id for q in resumed.questions] == [q.id for q in started.questions]

    def test_resume_without_attempt(self, session):
        assert session.resume() is None

    def test_feedback_only_in_feedback_modes(self, session):
        session.start("timed")
        assert session.answer(0) is None

        session.start("study")
        question = session.attempt.current_question
        result = session.answer(get_handler(question.type).expected(question))
        assert result.correct is True

    def test_actions_need_an_attempt(self, session):
        with pytest.raises(PayPrepError):
            session.answer(1)

    def test_tick_autosaves(self, session, storage, app_settings):
        session.start("study")
        for _ in range(app_settings.autosave_interval_seconds):
            session.tick()
        assert storage.load_attempt().elapsed_seconds == app_settings.autosave_interval_seconds

    def test_tick_submits_on_expiry(self, session, storage):
        attempt = session.start("timed")
        attempt.time_limit_seconds = 3
        assert session.tick() is None
        assert session.tick() is None
        scored = session.tick()

        assert scored is not None
        assert session.attempt is None
        assert storage.load_attempt() is None

    def test_submit_records_history_and_profile(self, session, storage):
        session.start("study")
        answer_everything_correctly(session)
        scored = session.submit()

        assert scored.summary.score_percent == 100
        assert scored.summary.passed is True
        assert scored.summary.date is not None
        assert storage.load_attempt() is None
        assert [s.attempt_id for s in storage.load_history()] == [scored.summary.attempt_id]
        assert storage.load_weakness() is not None
        assert storage.load_last_result().summary == scored.summary

    def test_weakness_mode_uses_profile(self, session):
        session.start("timed")
        session.submit()
        attempt = session.start("weakness")
        assert len(attempt.questions) == 20

    def test_retake_incorrect(self, session):
        started = session.start("study")
        session.answer(get_handler(started.questions[0].type).expected(started.questions[0]), question_id=started.questions[0].id)
        session.submit()

        retake = session.retake("incorrect")
        assert len(retake.questions) == len(started.questions) - 1
        assert retake.attempt_id != started.attempt_id

    def test_retake_without_result(self, session):
        with pytest.raises(PayPrepError):
            session.retake("incorrect")

    def test_retake_nothing_matches(self, session):
        session.start("study")
        session.submit()
        with pytest.raises(PayPrepError):
            session.retake("flagged")

    def test_navigation(self, session):
        session.start("study")
        assert session.next() == 1
        assert session.previous() == 0
        assert session.previous() == 0
        assert session.go_to(500) == 19

    def test_hint_reveals_steps_and_counts(self, session, storage):
        attempt = session.start("study")
        attempt.questions[0] = replace(attempt.questions[0], steps=["Gross pay first", "Then pre-tax deductions"])

        assert session.hint() == ["Gross pay first", "Then pre-tax deductions"]
        session.hint()
        assert storage.load_attempt().hint_usage == {attempt.questions[0].id: 2}

    def test_hint_unavailable_without_feedback(self, session):
        attempt = session.start("timed")
        attempt.questions[0] = replace(attempt.questions[0], steps=["step"])
        with pytest.raises(PayPrepError):
            session.hint()

    def test_hint_needs_steps(self, session):
        attempt = session.start("study")
        attempt.questions[0] = replace(attempt.questions[0], steps=None)
        with pytest.raises(PayPrepError):
            session.hint()
        assert attempt.hint_usage == {}
