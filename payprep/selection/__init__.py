"""
Module: selection

Purpose:
    Stratified question selection for attempts. Allocates integer targets
    per domain/difficulty/type from blueprint weights and fills each slot
    with a hydrated question.

Key Functions:
    - select_questions(): Main entry point for selection
    - build_weighted_targets(): Weight map -> exact integer counts
    - apply_mode_weights(): Domain focus / weakness / drills adjustments
"""

from .allocator import build_weighted_targets, ordered_keys
from .engine import SelectionEngine, apply_mode_weights, select_questions

__all__ = [
    "SelectionEngine",
    "apply_mode_weights",
    "build_weighted_targets",
    "ordered_keys",
    "select_questions",
]
