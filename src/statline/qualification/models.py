from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal

from statline.core.enums import QualificationMetric

# Qualified batters need 3.1 plate appearances per team game; qualified
# pitchers need one inning per team game.
PLATE_APPEARANCES_PER_GAME = Decimal("3.1")
INNINGS_PER_GAME = Decimal("1")


@dataclass(frozen=True)
class QualificationThreshold:
    """Minimum workloads for the "qualified leaders" view.

    Attributes:
        games_played: Team games the thresholds were derived from (0 if unknown).
        min_plate_appearances: ``ceil(games_played * 3.1)``.
        min_innings: ``games_played``.

    Examples:
        >>> t = QualificationThreshold.from_games(130)
        >>> t.min_plate_appearances, t.min_innings
        (403, 130.0)
    """

    games_played: float = 0
    min_plate_appearances: int = 0
    min_innings: float = 0

    @classmethod
    def zero(cls) -> "QualificationThreshold":
        return cls()

    @classmethod
    def from_games(cls, games_played: float) -> "QualificationThreshold":
        if not games_played or games_played <= 0:
            return cls.zero()
        # Decimal keeps exact products exact (130 * 3.1 == 403, not 403.00000000000006).
        games = Decimal(str(games_played))
        return cls(
            games_played=games_played,
            min_plate_appearances=int(math.ceil(games * PLATE_APPEARANCES_PER_GAME)),
            min_innings=float(games * INNINGS_PER_GAME),
        )

    @property
    def is_active(self) -> bool:
        return self.min_plate_appearances > 0 or self.min_innings > 0

    def minimum_for(self, metric: QualificationMetric) -> float:
        if metric is QualificationMetric.PLATE_APPEARANCES:
            return self.min_plate_appearances
        if metric is QualificationMetric.INNINGS:
            return self.min_innings
        raise ValueError(f"Unknown qualification metric: {metric}")


def thresholds_for(games_played: float) -> QualificationThreshold:
    """Thresholds for a known number of team games."""
    return QualificationThreshold.from_games(games_played)
