from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence

from statline.datasets.models import Dataset
from statline.datasets.registry import DatasetDefinition, DatasetRegistry
from statline.datasets.store import DatasetStore
from .models import QualificationThreshold
from .strategies import (
    GAME_LOG,
    GAMES_PLAYED_STRATEGIES,
    STANDINGS,
    VOLUME_STRATEGIES,
    GamesPlayedStrategy,
)

logger = logging.getLogger(__name__)


async def _source_dataset(
    store: DatasetStore,
    registry: DatasetRegistry,
    source: str,
    loaded: Dict[str, Optional[Dataset]],
) -> Optional[Dataset]:
    if source in loaded:
        return loaded[source]
    if source == GAME_LOG:
        dataset_id = registry.qualification.game_log
    elif source == STANDINGS:
        dataset_id = registry.qualification.standings
    else:
        dataset_id = None
    dataset = None
    if dataset_id:
        result = await store.load(dataset_id)
        if result.ok:
            dataset = result.dataset
        else:
            logger.info("Qualification source %s unavailable: %s", dataset_id, result.reason)
    loaded[source] = dataset
    return dataset


async def derive_games_played(
    store: DatasetStore,
    registry: DatasetRegistry,
    strategies: Sequence[GamesPlayedStrategy] = GAMES_PLAYED_STRATEGIES,
) -> float:
    """Run the games-played strategies in order; first positive count wins.

    Datasets are only loaded when a strategy needs them, so the standings
    snapshot is never fetched while the game log already has played games.
    Returns 0 when every strategy comes up empty.
    """
    loaded: Dict[str, Optional[Dataset]] = {}
    for strategy in strategies:
        dataset = await _source_dataset(store, registry, strategy.source, loaded)
        if dataset is None:
            continue
        definition = dataset.describe()
        games = strategy.count(dataset, definition, registry.team)
        if games and games > 0:
            logger.debug("Games played from %s: %s", strategy.name, games)
            return games
        logger.debug("Games-played strategy %s gave nothing", strategy.name)
    return 0


async def compute_thresholds(
    store: DatasetStore,
    registry: DatasetRegistry,
    strategies: Sequence[GamesPlayedStrategy] = GAMES_PLAYED_STRATEGIES,
) -> QualificationThreshold:
    """Derive the session's qualification thresholds.

    Never raises: the thresholds only refine the leader views, so any
    failure is logged and degrades to zero thresholds, which turn the
    qualified filter into a no-op.
    """
    try:
        games = await derive_games_played(store, registry, strategies)
    except Exception as e:  # noqa: BLE001
        logger.warning("Qualification thresholds unavailable: %s", e)
        return QualificationThreshold.zero()
    if not games:
        logger.info("No games played found; qualification thresholds are zero")
        return QualificationThreshold.zero()
    thresholds = QualificationThreshold.from_games(games)
    logger.info(
        "Qualification thresholds: %s games → PA %d, IP %s",
        games,
        thresholds.min_plate_appearances,
        thresholds.min_innings,
    )
    return thresholds


def estimate_volume(row: Mapping[str, str], definition: DatasetDefinition) -> Optional[float]:
    """Workload of a row for its dataset's qualification metric, or None."""
    if definition.qualification is None:
        return None
    for strategy in VOLUME_STRATEGIES.get(definition.qualification, ()):
        volume = strategy.estimate(row, definition)
        if volume is not None:
            return volume
    return None


def is_qualified(
    row: Mapping[str, str],
    definition: DatasetDefinition,
    thresholds: QualificationThreshold,
) -> bool:
    """Whether a row meets its dataset's threshold.

    Datasets without a qualification metric and zero thresholds qualify every
    row. A row whose workload cannot be estimated does not qualify.
    """
    if definition.qualification is None:
        return True
    minimum = thresholds.minimum_for(definition.qualification)
    if minimum <= 0:
        return True
    volume = estimate_volume(row, definition)
    return volume is not None and volume >= minimum
