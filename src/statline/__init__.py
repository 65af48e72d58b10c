"""statline: tabular engine for baseball stat snapshots.

Loads flat CSV snapshots (game log, standings, batting, pitching), memoizes
them per session and answers search/facet/sort/qualified-leader queries
over them. Rendering is left to the caller.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
