"""
Adaptive weighting from attempt history.
"""

from .weakness import WeakSpot, WeaknessProfile, compute_weakness_profile, merge_weights

__all__ = [
    "WeakSpot",
    "WeaknessProfile",
    "compute_weakness_profile",
    "merge_weights",
]
