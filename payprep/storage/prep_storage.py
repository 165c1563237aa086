"""
Versioned persistence for settings, attempts, history and the weakness profile.

All keys share the prefix `payrollPrep:v2:`. Anything unreadable (missing,
corrupt JSON, or data that no longer validates) loads as the empty default
with a warning; it never raises.
"""

from __future__ import annotations

import json
from typing import Any, Callable, TypeVar

from loguru import logger
from pydantic import ValidationError

from payprep.adaptive.weakness import WeaknessProfile
from payprep.attempt.results import AttemptSummary, ScoredAttempt
from payprep.attempt.state import AttemptState
from payprep.core.settings import PracticeSettings

from .backends import KeyValueStore

T = TypeVar("T")

NAMESPACE = "payrollPrep:"
VERSION = "v2"
PREFIX = f"{NAMESPACE}{VERSION}:"

KEYS = {
    "settings": f"{PREFIX}settings",
    "attempt": f"{PREFIX}attempt:current",
    "last_result": f"{PREFIX}attempt:last",
    "history": f"{PREFIX}attempt:history",
    "weakness": f"{PREFIX}weaknessProfile",
}

DEFAULT_HISTORY_LIMIT = 10


class PrepStorage:
    """
    Typed access to the persisted state in a KeyValueStore.

    Example:
        storage = PrepStorage(JsonFileStore(settings.data_dir))
        storage.migrate_if_needed()
        prefs = storage.load_settings()
    """

    def __init__(self, store: KeyValueStore, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self.store = store
        self.history_limit = history_limit

    # ─── helpers ──────────────────────────────────────────────

    def _read(self, name: str, parse: Callable[[Any], T]) -> T | None:
        key = KEYS[name]
        try:
            raw = self.store.get(key)
        except OSError as e:
            logger.warning(f"Cannot read {key}: {e}")
            return None
        if not raw:
            return None
        try:
            return parse(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable {key}: {e}")
            return None

    def _write(self, name: str, data: Any) -> None:
        self.store.set(KEYS[name], json.dumps(data, indent=2))

    # ─── settings ─────────────────────────────────────────────

    def load_settings(self) -> PracticeSettings:
        """Stored settings, or defaults when nothing usable is stored."""
        return self._read("settings", PracticeSettings.model_validate) or PracticeSettings()

    def save_settings(self, settings: PracticeSettings) -> None:
        self._write("settings", settings.model_dump(mode="json"))

    # ─── current attempt ──────────────────────────────────────

    def load_attempt(self) -> AttemptState | None:
        return self._read("attempt", AttemptState.from_dict)

    def save_attempt(self, attempt: AttemptState) -> None:
        self._write("attempt", attempt.to_dict())

    def clear_attempt(self) -> None:
        self.store.delete(KEYS["attempt"])

    # ─── last scored attempt ──────────────────────────────────

    def load_last_result(self) -> ScoredAttempt | None:
        return self._read("last_result", ScoredAttempt.from_dict)

    def save_last_result(self, scored: ScoredAttempt) -> None:
        self._write("last_result", scored.to_dict())

    # ─── history ──────────────────────────────────────────────

    def load_history(self) -> list[AttemptSummary]:
        """Attempt summaries, most recent first; [] when nothing usable is stored."""
        rows = self._read("history", lambda data: [AttemptSummary.model_validate(row) for row in data])
        return rows or []

    def save_history(self, history: list[AttemptSummary]) -> None:
        self._write("history", [row.model_dump(mode="json") for row in history[: self.history_limit]])

    def prepend_history(self, summary: AttemptSummary) -> list[AttemptSummary]:
        """Add a summary at the front, keeping at most history_limit entries."""
        history = [summary, *self.load_history()][: self.history_limit]
        self.save_history(history)
        return history

    # ─── weakness profile ─────────────────────────────────────

    def load_weakness(self) -> WeaknessProfile | None:
        return self._read("weakness", WeaknessProfile.model_validate)

    def save_weakness(self, profile: WeaknessProfile) -> None:
        self._write("weakness", profile.model_dump(mode="json"))

    # ─── maintenance ──────────────────────────────────────────

    def clear_all(self) -> None:
        for key in KEYS.values():
            self.store.delete(key)

    def migrate_if_needed(self) -> bool:
        """
        Drop every stored key when any belongs to another storage version.

        Returns:
            True if keys were removed
        """
        existing = [key for key in self.store.keys() if key.startswith(NAMESPACE)]
        if not any(not key.startswith(PREFIX) for key in existing):
            return False
        for key in existing:
            self.store.delete(key)
        logger.info(f"Cleared {len(existing)} keys from an older storage version")
        return True
