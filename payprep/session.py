"""
Practice session: ties settings, content, storage and the engine together.

One PracticeSession drives at most one in-progress attempt. The attempt is
snapshotted through PrepStorage on every learner action and every
`autosave_interval_seconds` of elapsed time, so a later process can resume
it exactly.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from loguru import logger

from config import Settings, get_settings
from payprep.adaptive.weakness import compute_weakness_profile
from payprep.attempt.results import ScoredAttempt, score_attempt
from payprep.attempt.state import AttemptState, new_attempt_id, retake_attempt
from payprep.content.loader import ContentLibrary
from payprep.core.exceptions import EmptyPoolError, PayPrepError
from payprep.core.rng import SeededRng, seed_from_inputs
from payprep.core.settings import PracticeMode, PracticeSettings, mode_config
from payprep.scoring import ScoreResult, score_question
from payprep.selection.engine import select_questions
from payprep.storage.prep_storage import PrepStorage


def build_attempt(
    library: ContentLibrary,
    prefs: PracticeSettings,
    mode: str | PracticeMode,
    domain_selection: Sequence[int] = (),
    weakness_profile=None,
    default_count: int = 20,
    max_slot_attempts: int = 8,
    seed: str | None = None,
) -> AttemptState:
    """
    Build a fresh attempt.

    Args:
        library: Loaded content packs
        prefs: Learner settings (enabled packs, fun mode, blueprint)
        mode: Practice mode
        domain_selection: Domains for domain-focus mode
        weakness_profile: Profile for weakness mode
        default_count: Question count when the blueprint has none for the mode
        max_slot_attempts: Hydrations per slot before a colliding slot is dropped
        seed: Fixed seed; derived from mode, time and a random salt when omitted

    Raises:
        EmptyPoolError: If no enabled content yields a question
    """
    mode_value = str(getattr(mode, "value", mode))
    started_at = datetime.now().isoformat()
    seed = seed or seed_from_inputs(mode_value, started_at, uuid.uuid4().hex)
    rng = SeededRng(seed)

    pool = library.build_pool(prefs.enabled_packs, fun_mode=prefs.fun_mode)
    blueprint = prefs.blueprint.for_mode(mode_value)
    questions = select_questions(
        pool,
        rng,
        blueprint,
        mode_value,
        domain_selection=domain_selection,
        weakness_profile=weakness_profile,
        default_count=default_count,
        max_slot_attempts=max_slot_attempts,
    )
    if not questions:
        raise EmptyPoolError()

    time_limit = blueprint.time_limit_minutes * 60 if mode_config(mode_value).time_limited else None
    return AttemptState(
        attempt_id=new_attempt_id(),
        seed=seed,
        mode=mode_value,
        questions=questions,
        started_at=started_at,
        time_limit_seconds=time_limit,
        blueprint=blueprint.model_dump(mode="json"),
        domain_selection=[int(d) for d in domain_selection],
    )


class PracticeSession:
    """
    Orchestrates one learner's attempts.

    Attributes:
        library: Content packs
        storage: Persisted state
        config: Application settings
        attempt: The in-progress attempt, if any
    """

    def __init__(self, library: ContentLibrary, storage: PrepStorage, config: Settings | None = None):
        self.library = library
        self.storage = storage
        self.config = config or get_settings()
        self.attempt: AttemptState | None = None
        self._last_autosave = 0

    @property
    def prefs(self) -> PracticeSettings:
        return self.storage.load_settings()

    def _require_attempt(self) -> AttemptState:
        if self.attempt is None:
            raise PayPrepError("No attempt in progress. Start one first.")
        return self.attempt

    def save(self) -> None:
        if self.attempt is not None:
            self.storage.save_attempt(self.attempt)
            self._last_autosave = self.attempt.elapsed_seconds

    # ─── lifecycle ────────────────────────────────────────────

    def start(
        self,
        mode: str | PracticeMode | None = None,
        domain_selection: Sequence[int] = (),
        seed: str | None = None,
    ) -> AttemptState:
        """Build and persist a new attempt, replacing any in-progress one."""
        prefs = self.prefs
        mode_value = str(getattr(mode, "value", mode)) if mode else prefs.mode.value
        profile = self.storage.load_weakness() if mode_value == PracticeMode.WEAKNESS.value else None
        if mode_value == PracticeMode.WEAKNESS.value and profile is None:
            logger.info("No weakness profile yet; using blueprint weights unchanged")

        self.attempt = build_attempt(
            self.library,
            prefs,
            mode_value,
            domain_selection=domain_selection,
            weakness_profile=profile,
            default_count=self.config.default_question_count,
            max_slot_attempts=self.config.max_slot_attempts,
            seed=seed,
        )
        self.save()
        logger.info(
            f"Started {self.attempt.attempt_id} ({mode_value}) with {len(self.attempt.questions)} questions"
        )
        return self.attempt

    def resume(self) -> AttemptState | None:
        """Load the in-progress attempt from storage, None when there is none."""
        attempt = self.storage.load_attempt()
        if attempt is None or attempt.is_complete:
            return None
        self.attempt = attempt
        self._last_autosave = attempt.elapsed_seconds
        return attempt

    # ─── learner actions ──────────────────────────────────────

    def answer(self, response: Any, question_id: str | None = None) -> ScoreResult | None:
        """
        Record a response (default: the current question).

        Returns:
            Immediate feedback for modes that give it, otherwise None
        """
        attempt = self._require_attempt()
        question = attempt.question_by_id(question_id) if question_id else attempt.current_question
        if question is None:
            raise PayPrepError(f"Unknown question: {question_id}")
        attempt.record_response(question.id, response)
        self.save()
        if not mode_config(attempt.mode).feedback:
            return None
        return score_question(question, response, partial_credit=self.prefs.partial_credit)

    def toggle_flag(self, question_id: str | None = None) -> bool:
        attempt = self._require_attempt()
        question_id = question_id or attempt.current_question.id
        flagged = attempt.toggle_flag(question_id)
        self.save()
        return flagged

    def hint(self, question_id: str | None = None) -> list[str]:
        """
        Reveal the worked steps of a question and count the request.

        Hints exist only in modes that give feedback and only for
        questions that carry steps.
        """
        attempt = self._require_attempt()
        question = attempt.question_by_id(question_id) if question_id else attempt.current_question
        if question is None:
            raise PayPrepError(f"Unknown question: {question_id}")
        if not mode_config(attempt.mode).feedback:
            raise PayPrepError(f"Hints are not available in {attempt.mode} mode")
        if not question.steps:
            raise PayPrepError("This question has no hint")
        attempt.use_hint(question.id)
        self.save()
        return list(question.steps)

    def go_to(self, index: int) -> int:
        attempt = self._require_attempt()
        position = attempt.go_to(index)
        self.save()
        return position

    def next(self) -> int:
        attempt = self._require_attempt()
        position = attempt.advance(partial_credit=self.prefs.partial_credit)
        self.save()
        return position

    def previous(self) -> int:
        return self.go_to(self._require_attempt().current_index - 1)

    def tick(self, seconds: int = 1) -> ScoredAttempt | None:
        """
        Advance the attempt clock.

        Autosaves every `autosave_interval_seconds`; when a time-limited
        attempt runs out, submits it and returns the result.
        """
        attempt = self._require_attempt()
        expired = attempt.tick(seconds)
        if expired:
            logger.info(f"Time expired for {attempt.attempt_id}; submitting")
            return self.submit()
        if attempt.elapsed_seconds - self._last_autosave >= self.config.autosave_interval_seconds:
            self.save()
        return None

    def submit(self) -> ScoredAttempt:
        """
        Score the attempt and record it.

        Clears the current attempt, prepends the summary to history and
        recomputes the weakness profile (the prior profile stays when none
        can be computed).
        """
        attempt = self._require_attempt()
        scored = score_attempt(
            attempt,
            partial_credit=self.prefs.partial_credit,
            passing_score=self.config.passing_score,
        )
        scored.summary.date = datetime.now().isoformat()
        attempt.mark_complete()

        self.storage.clear_attempt()
        self.storage.save_last_result(scored)
        history = self.storage.prepend_history(scored.summary)
        profile = compute_weakness_profile(history)
        if profile is not None:
            self.storage.save_weakness(profile)

        logger.info(
            f"Submitted {attempt.attempt_id}: {scored.summary.score_percent}% "
            f"({'pass' if scored.summary.passed else 'fail'})"
        )
        self.attempt = None
        return scored

    def retake(self, status: str = "incorrect") -> AttemptState:
        """
        Start a new attempt from the last result's incorrect, correct or flagged questions.

        Raises:
            PayPrepError: If there is no finished attempt or nothing matches
        """
        last = self.storage.load_last_result()
        if last is None:
            raise PayPrepError("No finished attempt to retake.")
        mode = last.summary.mode
        time_limit = self.prefs.blueprint.time_limit_minutes * 60 if mode_config(mode).time_limited else None
        seed = seed_from_inputs(mode, datetime.now().isoformat(), uuid.uuid4().hex)
        attempt = retake_attempt(last, status, seed=seed, time_limit_seconds=time_limit)
        if attempt is None:
            raise PayPrepError(f"No {status} questions to retake.")
        self.attempt = attempt
        self.save()
        logger.info(f"Retake {attempt.attempt_id}: {len(attempt.questions)} {status} questions")
        return attempt
