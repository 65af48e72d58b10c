"""Session-scoped dataset store.

The store is created by the caller and lives as long as the session (one
page view, one CLI run). It is the only shared mutable state in the
package:

- the first successful load of an id is cached and never re-fetched
- concurrent loads of the same id share one in-flight fetch+parse, so two
  callers can never see differently shaped snapshots of the same id
- failures are per id, reported as ``LoadResult(ok=False)`` and not cached
"""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional

from statline.core.csv_text import parse_csv
from statline.core.values import infer_schema
from .models import Dataset, LoadResult
from .registry import DatasetDefinition, DatasetRegistry, UnknownDatasetError
from .sources import DatasetLoadError, TextSource

logger = logging.getLogger(__name__)


def build_dataset(definition: DatasetDefinition, text: str) -> Dataset:
    """Parse snapshot text into a Dataset.

    The first row is the header. Each data row is zipped to it: missing
    trailing fields become ``""``, surplus fields are dropped. Row order is
    kept as in the source.
    """
    parsed = parse_csv(text)
    header = tuple(parsed[0]) if parsed else ()
    rows = []
    for fields in parsed[1:]:
        record = {h: (fields[i] if i < len(fields) else "") for i, h in enumerate(header)}
        rows.append(MappingProxyType(record))
    schema = infer_schema(header, rows, definition.roles())
    return Dataset(
        dataset_id=definition.dataset_id,
        label=definition.label,
        header=header,
        rows=tuple(rows),
        schema=MappingProxyType(schema),
        definition=definition,
    )


class DatasetStore:
    """Load, parse and memoize datasets declared in a registry."""

    def __init__(self, registry: DatasetRegistry, source: TextSource) -> None:
        self.registry = registry
        self.source = source
        self._cache: Dict[str, Dataset] = {}
        self._inflight: Dict[str, "asyncio.Task[Dataset]"] = {}

    def get_cached(self, dataset_id: str) -> Optional[Dataset]:
        """Return the dataset if it has already been loaded successfully."""
        return self._cache.get(dataset_id)

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._cache

    def loaded_ids(self) -> List[str]:
        return list(self._cache)

    async def load(self, dataset_id: str) -> LoadResult:
        """Load a dataset, reusing the cache or an in-flight load.

        Never raises for transport, decode or unknown-id problems; those
        come back as ``LoadResult.unavailable``.
        """
        cached = self._cache.get(dataset_id)
        if cached is not None:
            return LoadResult.loaded(cached)

        try:
            definition = self.registry.get(dataset_id)
        except UnknownDatasetError:
            logger.warning("Unknown dataset requested: %s", dataset_id)
            return LoadResult.unavailable(dataset_id, "unknown dataset")

        task = self._inflight.get(dataset_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_build(definition))
            self._inflight[dataset_id] = task
            task.add_done_callback(lambda t, key=dataset_id: self._forget(key, t))

        try:
            dataset = await asyncio.shield(task)
        except DatasetLoadError as e:
            return LoadResult.unavailable(dataset_id, e.reason)
        return LoadResult.loaded(dataset)

    async def load_many(self, dataset_ids: Iterable[str]) -> Dict[str, LoadResult]:
        ids = list(dataset_ids)
        results = await asyncio.gather(*(self.load(i) for i in ids))
        return dict(zip(ids, results))

    async def _fetch_and_build(self, definition: DatasetDefinition) -> Dataset:
        dataset_id = definition.dataset_id
        logger.info("Loading dataset %s (%s)", dataset_id, definition.path)
        try:
            text = await self.source.fetch_text(definition)
            dataset = build_dataset(definition, text)
        except DatasetLoadError as e:
            logger.warning("Dataset %s unavailable: %s", dataset_id, e.reason)
            raise
        except Exception as e:  # noqa: BLE001
            logger.error("Dataset %s failed to load: %s", dataset_id, e)
            raise DatasetLoadError(dataset_id, str(e) or type(e).__name__) from e
        # First successful load wins; later ones never replace it.
        dataset = self._cache.setdefault(dataset_id, dataset)
        logger.debug(
            "Loaded dataset %s: %d columns, %d rows",
            dataset_id,
            len(dataset.header),
            len(dataset.rows),
        )
        return dataset

    def _forget(self, dataset_id: str, task: "asyncio.Task[Dataset]") -> None:
        if self._inflight.get(dataset_id) is task:
            del self._inflight[dataset_id]
        # Mark the outcome as retrieved even if every awaiting caller was cancelled.
        if not task.cancelled():
            task.exception()
