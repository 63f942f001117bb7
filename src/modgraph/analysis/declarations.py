"""Declaration statistics for abstractness and presentation aggregates.

``classify()`` turns a module's declaration list into a ``DeclStat``
counter bag. Counter bags are combined with ``+`` / ``-`` (or in place
with ``add()`` / ``sub()``) when the graph builder maintains its
upstream, downstream and graph-wide aggregates.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from ..core.models import Declaration, DeclKind

_FIELDS = ("functions", "all_types", "contract_types", "constants", "variables", "other")


@dataclass
class DeclStat:
    """Per-kind declaration counts.

    ``contract_types`` is a subset of ``all_types``: an exported contract
    type increments both counters.

    Attributes:
        functions: Function declarations
        all_types: All type declarations, contracts included
        contract_types: Exported contract-only type declarations
        constants: Constant declarations
        variables: Variable declarations
        other: Anything else (imports, statements, malformed entries)
    """

    functions: int = 0
    all_types: int = 0
    contract_types: int = 0
    constants: int = 0
    variables: int = 0
    other: int = 0

    def add(self, other: DeclStat) -> None:
        """Add ``other`` into this instance."""
        for name in _FIELDS:
            setattr(self, name, getattr(self, name) + getattr(other, name))

    def sub(self, other: DeclStat) -> None:
        """Subtract ``other`` from this instance."""
        for name in _FIELDS:
            setattr(self, name, getattr(self, name) - getattr(other, name))

    def __add__(self, other: DeclStat) -> DeclStat:
        result = self.copy()
        result.add(other)
        return result

    def __sub__(self, other: DeclStat) -> DeclStat:
        result = self.copy()
        result.sub(other)
        return result

    def copy(self) -> DeclStat:
        return DeclStat(**asdict(self))

    @property
    def total(self) -> int:
        """Total declarations; contract types are already part of all_types."""
        return (
            self.functions + self.all_types + self.constants + self.variables + self.other
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def classify_declaration(decl: Any, stat: DeclStat) -> None:
    """Count one declaration into ``stat``.

    Anything that is not a well-formed ``Declaration`` lands in ``other``.
    """
    if not isinstance(decl, Declaration):
        stat.other += 1
        return

    kind = decl.kind
    if kind == DeclKind.FUNCTION:
        stat.functions += 1
    elif kind == DeclKind.TYPE:
        stat.all_types += 1
        if decl.exported and decl.contract:
            stat.contract_types += 1
    elif kind == DeclKind.CONSTANT:
        stat.constants += 1
    elif kind == DeclKind.VARIABLE:
        stat.variables += 1
    else:
        stat.other += 1


def classify(declarations: Iterable[Any]) -> DeclStat:
    """Classify a declaration list into per-kind counts.

    Args:
        declarations: Declarations of a single module

    Returns:
        DeclStat with every declaration counted exactly once

    Examples:
        >>> from modgraph.core.models import Declaration, DeclKind
        >>> stat = classify([
        ...     Declaration(DeclKind.TYPE, "Reader", exported=True, contract=True),
        ...     Declaration(DeclKind.TYPE, "Buffer", exported=True),
        ...     Declaration(DeclKind.FUNCTION, "read"),
        ... ])
        >>> (stat.all_types, stat.contract_types, stat.functions)
        (2, 1, 1)
    """
    stat = DeclStat()
    for decl in declarations:
        classify_declaration(decl, stat)
    return stat
