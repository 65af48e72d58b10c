"""Dataset definitions, text sources and the session-scoped store.

Public API:
    DatasetRegistry: dataset definitions loaded from YAML
    FileTextSource / HttpTextSource: where snapshot text comes from
    DatasetStore: memoizing loader, one fetch+parse per id per session
    Dataset / LoadResult: loaded snapshot and the load outcome

Usage:
    >>> registry = DatasetRegistry.default()
    >>> store = DatasetStore(registry, FileTextSource(Path("public/data")))
    >>> result = asyncio.run(store.load("batters"))
"""

from .models import Dataset, LoadResult
from .registry import (
    DatasetDefinition,
    DatasetRegistry,
    QualificationSources,
    TeamDefinition,
    UnknownDatasetError,
)
from .sources import DatasetLoadError, FileTextSource, HttpTextSource, TextSource
from .store import DatasetStore, build_dataset

__all__ = [
    "Dataset",
    "LoadResult",
    "DatasetDefinition",
    "DatasetRegistry",
    "QualificationSources",
    "TeamDefinition",
    "UnknownDatasetError",
    "DatasetLoadError",
    "FileTextSource",
    "HttpTextSource",
    "TextSource",
    "DatasetStore",
    "build_dataset",
]
