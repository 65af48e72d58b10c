import argparse
import asyncio
import locale
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

import colorlog
import pandas as pd
import yaml

from statline import __version__ as _PACKAGE_VERSION
from statline.core.enums import SortDirection
from statline.datasets import (
    DatasetRegistry,
    DatasetStore,
    FileTextSource,
    HttpTextSource,
    TextSource,
)
from statline.qualification import QualificationThreshold, compute_thresholds
from statline.query import (
    GameEntry,
    QueryState,
    TableView,
    build_view,
    default_sort_direction,
    facet_options,
    recent_games,
    sortable_columns,
    upcoming_games,
)

DEFAULT_DATA_ROOT = Path("data")


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def use_system_collation() -> None:
    """Sort text with the user's collation locale instead of the C default."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.warning("Unsupported collation locale, using code point order: %s", e)


def _load_registry(args: argparse.Namespace) -> Optional[DatasetRegistry]:
    registry_path = getattr(args, "registry", None)
    try:
        if registry_path:
            return DatasetRegistry.from_yaml(Path(registry_path))
        return DatasetRegistry.default()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logging.error("Failed to load dataset registry: %s", e)
        return None


def _make_source(args: argparse.Namespace) -> TextSource:
    base_url = getattr(args, "base_url", None)
    if base_url:
        return HttpTextSource(base_url)
    return FileTextSource(Path(getattr(args, "data_root", None) or DEFAULT_DATA_ROOT))


async def _close_source(source: TextSource) -> None:
    if isinstance(source, HttpTextSource):
        await source.aclose()


def view_to_frame(view: TableView, limit: Optional[int] = None) -> pd.DataFrame:
    """Tabulate a view's display columns for console output."""
    rows = view.rows[:limit] if limit else view.rows
    records = [{c: str(r.get(c, "")).replace("\n", " ") for c in view.header} for r in rows]
    return pd.DataFrame(records, columns=list(view.header))


def _games_frame(entries: Sequence[GameEntry], columns: Sequence[str]) -> pd.DataFrame:
    records = [{c: str(e.row.get(c, "")) for c in columns} for e in entries]
    return pd.DataFrame(records, columns=list(columns))


def cmd_datasets(args: argparse.Namespace) -> int:
    """List the datasets declared in the registry."""
    registry = _load_registry(args)
    if registry is None:
        return 2
    for d in registry.all():
        qual = f" [qualified on {d.qualification.value}]" if d.qualification else ""
        print(f"{d.dataset_id}\t{d.label}\t{d.path}{qual}")
    return 0


async def _run_show(args: argparse.Namespace, registry: DatasetRegistry) -> int:
    source = _make_source(args)
    store = DatasetStore(registry, source)
    try:
        thresholds = QualificationThreshold.zero()
        if args.qualified:
            thresholds = await compute_thresholds(store, registry)
        result = await store.load(args.dataset)
    finally:
        await _close_source(source)

    state = QueryState(
        free_text=args.q or "",
        facet_value=args.facet or None,
        qualified_only=bool(args.qualified),
    )
    if result.ok and result.dataset is not None and args.sort:
        direction = (
            SortDirection(args.direction)
            if args.direction
            else default_sort_direction(result.dataset, args.sort)
        )
        state = replace(state, sort_column=args.sort, sort_direction=direction)

    label = registry.get(args.dataset).label if args.dataset in registry else None
    view = build_view(result, thresholds, state, label=label)
    if not view.available:
        logging.error("Could not load %s: %s", view.dataset_id, view.reason)
        return 2

    if args.qualified and not thresholds.is_active:
        logging.warning("Qualification thresholds unknown; showing all rows")
    print(f"{view.dataset_label} ・ {view.row_count}件")
    frame = view_to_frame(view, args.limit)
    if not frame.empty:
        print(frame.to_string(index=False))
    if args.options and result.dataset is not None:
        facets = facet_options(result.dataset)
        if facets:
            print("facets: " + ", ".join(facets))
        sortable = sortable_columns(result.dataset)
        if sortable:
            print("sortable: " + ", ".join(sortable))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Query one dataset and print the resulting table."""
    registry = _load_registry(args)
    if registry is None:
        return 2
    return asyncio.run(_run_show(args, registry))


async def _run_thresholds(registry: DatasetRegistry, source: TextSource) -> QualificationThreshold:
    store = DatasetStore(registry, source)
    try:
        return await compute_thresholds(store, registry)
    finally:
        await _close_source(source)


def cmd_thresholds(args: argparse.Namespace) -> int:
    """Print the games played and the derived qualification thresholds."""
    registry = _load_registry(args)
    if registry is None:
        return 2
    thresholds = asyncio.run(_run_thresholds(registry, _make_source(args)))
    if not thresholds.is_active:
        logging.warning("No games played found; thresholds are zero")
    print(f"games played: {thresholds.games_played:g}")
    print(f"min plate appearances: {thresholds.min_plate_appearances}")
    print(f"min innings: {thresholds.min_innings:g}")
    return 0


async def _load_one(registry: DatasetRegistry, source: TextSource, dataset_id: str):
    store = DatasetStore(registry, source)
    try:
        return await store.load(dataset_id)
    finally:
        await _close_source(source)


def cmd_schedule(args: argparse.Namespace) -> int:
    """Print the most recent results and the coming week's fixtures."""
    registry = _load_registry(args)
    if registry is None:
        return 2
    dataset_id = registry.qualification.game_log
    if not dataset_id:
        logging.error("No game log dataset configured in the registry")
        return 2
    result = asyncio.run(_load_one(registry, _make_source(args), dataset_id))
    if not result.ok or result.dataset is None:
        logging.error("Could not load %s: %s", dataset_id, result.reason)
        return 2
    today = date.fromisoformat(args.today) if args.today else date.today()
    dataset = result.dataset
    columns: List[str] = list(dataset.header)
    print("recent:")
    recent = recent_games(dataset, args.recent)
    print(_games_frame(recent, columns).to_string(index=False) if recent else "  (none)")
    print("upcoming:")
    upcoming = upcoming_games(dataset, today, args.days)
    print(_games_frame(upcoming, columns).to_string(index=False) if upcoming else "  (none)")
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument(
        "--data-root",
        default=None,
        help="Directory holding the CSV snapshots (defaults to ./data)",
    )
    group.add_argument(
        "--base-url",
        default=None,
        help="Fetch the CSV snapshots over HTTP relative to this URL",
    )
    p.add_argument(
        "--registry",
        default=None,
        help="Path to a datasets.yaml (defaults to the packaged registry)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="statline",
        description=f"statline (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_datasets = sub.add_parser("datasets", help="List configured datasets")
    p_datasets.add_argument("--registry", default=None, help="Path to a datasets.yaml")
    p_datasets.set_defaults(func=cmd_datasets)

    p_show = sub.add_parser("show", help="Search, filter and sort one dataset")
    p_show.add_argument("dataset", help="Dataset id (see `statline datasets`)")
    p_show.add_argument("--q", default="", help="Free-text search across all columns")
    p_show.add_argument("--facet", default=None, help="Facet value (e.g. opponent)")
    p_show.add_argument("--sort", default=None, help="Column header to sort by")
    p_show.add_argument(
        "--direction",
        type=str.lower,
        choices=[d.value for d in SortDirection],
        default=None,
        help="Sort direction (defaults per column)",
    )
    p_show.add_argument(
        "--qualified",
        action="store_true",
        help="Only rows meeting the qualification threshold",
    )
    p_show.add_argument("--limit", type=int, default=None, help="Print at most N rows")
    p_show.add_argument(
        "--options",
        action="store_true",
        help="Also print facet values and sortable columns",
    )
    _add_source_args(p_show)
    p_show.set_defaults(func=cmd_show)

    p_thresholds = sub.add_parser("thresholds", help="Show qualification thresholds")
    _add_source_args(p_thresholds)
    p_thresholds.set_defaults(func=cmd_thresholds)

    p_schedule = sub.add_parser("schedule", help="Recent results and upcoming fixtures")
    p_schedule.add_argument("--today", default=None, help="Reference date (YYYY-MM-DD)")
    p_schedule.add_argument("--recent", type=int, default=7, help="Number of recent games")
    p_schedule.add_argument("--days", type=int, default=7, help="Days ahead to list")
    _add_source_args(p_schedule)
    p_schedule.set_defaults(func=cmd_schedule)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    use_system_collation()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
