from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from statline.core.enums import ColumnRole, QualificationMetric

DEFAULT_REGISTRY_FILE = Path(__file__).with_name("datasets.yaml")


class UnknownDatasetError(KeyError):
    """Raised when a dataset id is not declared in the registry."""


@dataclass(frozen=True)
class TeamDefinition:
    """How the subject team is spelled in the standings snapshot."""

    names: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()

    def matches(self, value: Optional[str]) -> bool:
        """Exact name, suffix, or alias-containment match."""
        t = str(value or "").strip()
        if not t:
            return False
        if t in self.names:
            return True
        if any(t.endswith(s) for s in self.suffixes if s):
            return True
        return any(a in t for a in self.aliases if a)


@dataclass(frozen=True)
class QualificationSources:
    """Dataset ids the games-played count is derived from."""

    game_log: Optional[str] = None
    standings: Optional[str] = None


@dataclass(frozen=True)
class DatasetDefinition:
    """Definition of one dataset: where it lives and what its columns mean.

    Columns are referenced by symbolic name everywhere; ``columns`` maps a
    symbolic name to the literal header strings it may appear under.
    """

    dataset_id: str
    label: str
    path: str
    columns: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    display: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()
    facet: Optional[str] = None
    innings: Tuple[str, ...] = ()
    lower_is_better: Tuple[str, ...] = ()
    sort_candidates: Tuple[str, ...] = ()
    sort_exclude: Tuple[str, ...] = ()
    qualification: Optional[QualificationMetric] = None

    def headers(self, symbol: str) -> Tuple[str, ...]:
        return tuple(self.columns.get(symbol, ()))

    def header_for(self, symbol: str, header: Iterable[str]) -> Optional[str]:
        """First literal header of ``symbol`` present in ``header``."""
        present = set(header)
        for h in self.headers(symbol):
            if h in present:
                return h
        return None

    def value(self, row: Mapping[str, str], symbol: str) -> Optional[str]:
        """Raw value of ``symbol`` in ``row``; None when no candidate column exists."""
        for h in self.headers(symbol):
            if h in row:
                return row[h]
        return None

    def literal_headers(self, symbols: Iterable[str]) -> List[str]:
        out: List[str] = []
        for s in symbols:
            out.extend(self.headers(s))
        return out

    def roles(self) -> Dict[str, ColumnRole]:
        """Literal header → role for columns with special classification."""
        return {h: ColumnRole.INNINGS for h in self.literal_headers(self.innings)}

    def role_of(self, column: str) -> Optional[ColumnRole]:
        return self.roles().get(column)

    def is_lower_better(self, column: str) -> bool:
        return column in self.literal_headers(self.lower_is_better)


def _as_tuple(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _parse_definition(dataset_id: str, item: Mapping) -> DatasetDefinition:
    if not isinstance(item, Mapping):
        raise ValueError(f"Dataset '{dataset_id}' must be a mapping")
    label = item.get("label")
    path = item.get("path")
    if not label or not path:
        raise ValueError(f"Dataset '{dataset_id}' requires both 'label' and 'path'")

    columns = {str(k): _as_tuple(v) for k, v in (item.get("columns") or {}).items()}
    qualification = item.get("qualification")
    try:
        metric = QualificationMetric(qualification) if qualification else None
    except ValueError as e:
        raise ValueError(
            f"Dataset '{dataset_id}': unknown qualification metric '{qualification}'"
        ) from e

    definition = DatasetDefinition(
        dataset_id=dataset_id,
        label=str(label),
        path=str(path),
        columns=columns,
        display=_as_tuple(item.get("display")),
        required=_as_tuple(item.get("required")),
        facet=item.get("facet") or None,
        innings=_as_tuple(item.get("innings")),
        lower_is_better=_as_tuple(item.get("lower_is_better")),
        sort_candidates=_as_tuple(item.get("sort_candidates")),
        sort_exclude=_as_tuple(item.get("sort_exclude")),
        qualification=metric,
    )

    referenced = (
        list(definition.display)
        + list(definition.required)
        + list(definition.innings)
        + list(definition.lower_is_better)
        + list(definition.sort_candidates)
        + list(definition.sort_exclude)
        + ([definition.facet] if definition.facet else [])
    )
    undeclared = sorted({s for s in referenced if s not in columns})
    if undeclared:
        raise ValueError(
            f"Dataset '{dataset_id}' references undeclared columns: {', '.join(undeclared)}"
        )
    return definition


def _section(data: Mapping, key: str, registry_file: Path) -> Mapping:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"'{key}' must be a mapping in {registry_file}")
    return value


class DatasetRegistry:
    """Load and query dataset definitions from YAML."""

    def __init__(
        self,
        definitions: Iterable[DatasetDefinition],
        team: Optional[TeamDefinition] = None,
        qualification: Optional[QualificationSources] = None,
    ) -> None:
        self._definitions: Dict[str, DatasetDefinition] = {
            d.dataset_id: d for d in definitions
        }
        self.team = team or TeamDefinition()
        self.qualification = qualification or QualificationSources()

    @classmethod
    def from_yaml(cls, registry_file: Path) -> "DatasetRegistry":
        """Parse a registry YAML file."""
        if not registry_file.exists():
            raise FileNotFoundError(f"Dataset registry not found: {registry_file}")
        with registry_file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Dataset registry must be a mapping: {registry_file}")
        team_data = _section(data, "team", registry_file)
        team = TeamDefinition(
            names=_as_tuple(team_data.get("names")),
            suffixes=_as_tuple(team_data.get("suffixes")),
            aliases=_as_tuple(team_data.get("aliases")),
        )
        qual_data = _section(data, "qualification", registry_file)
        qualification = QualificationSources(
            game_log=qual_data.get("game_log"),
            standings=qual_data.get("standings"),
        )
        entries = _section(data, "datasets", registry_file)
        definitions = [_parse_definition(str(k), v) for k, v in entries.items()]
        for ref in (qualification.game_log, qualification.standings):
            if ref and ref not in entries:
                raise ValueError(f"Qualification source '{ref}' is not a declared dataset")
        return cls(definitions, team, qualification)

    @classmethod
    def default(cls) -> "DatasetRegistry":
        """Registry shipped with the package."""
        return cls.from_yaml(DEFAULT_REGISTRY_FILE)

    def get(self, dataset_id: str) -> DatasetDefinition:
        try:
            return self._definitions[dataset_id]
        except KeyError:
            raise UnknownDatasetError(dataset_id) from None

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._definitions

    def all(self) -> List[DatasetDefinition]:
        """Return all definitions in declaration order."""
        return list(self._definitions.values())

    def ids(self) -> List[str]:
        return list(self._definitions)

    def with_qualification(self, metric: QualificationMetric) -> List[DatasetDefinition]:
        return [d for d in self._definitions.values() if d.qualification is metric]
