"""Typed exception hierarchy for modgraph.

Hierarchy
---------
ModGraphError (base)
├── ConfigError            – configuration file / value errors
├── LoaderError            – source root missing or unreadable
└── InvalidSortKeyError    – unknown presentation sort key

The graph engine itself never raises: incomplete input, missing type
information and malformed declarations are recorded as
``AnalysisIssue`` entries instead (see ``modgraph.analysis.issues``).
These exceptions belong to the layers around the engine.
"""

from typing import Any


class ModGraphError(Exception):
    """Base exception for modgraph."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(ModGraphError):
    """Configuration / validation errors."""

    pass


# ── Loader layer ────────────────────────────────────────────────────────


class LoaderError(ModGraphError):
    """Source root could not be loaded.

    Raised by ``load_modules()`` when the root does not exist or is not a
    directory. Individual files that fail to parse are not fatal; they are
    reported through ``LoadResult.errors``.
    """

    pass


# ── Presentation layer ──────────────────────────────────────────────────


class InvalidSortKeyError(ModGraphError):
    """Unknown metric name passed to ``sort_nodes()``."""

    pass
