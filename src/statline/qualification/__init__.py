"""Qualification thresholds for the "qualified leaders" views.

Public API:
    QualificationThreshold: minimum plate appearances / innings
    compute_thresholds: derive thresholds from the game log or standings
    estimate_volume / is_qualified: per-row workload checks
"""

from .engine import compute_thresholds, derive_games_played, estimate_volume, is_qualified
from .models import QualificationThreshold, thresholds_for
from .strategies import GAMES_PLAYED_STRATEGIES, VOLUME_STRATEGIES

__all__ = [
    "QualificationThreshold",
    "thresholds_for",
    "compute_thresholds",
    "derive_games_played",
    "estimate_volume",
    "is_qualified",
    "GAMES_PLAYED_STRATEGIES",
    "VOLUME_STRATEGIES",
]
