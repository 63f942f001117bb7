"""Robert Martin package metrics.

Computes, for every node of a built graph:

- Ca (afferent coupling): modules of the universe that import this module
- Ce (efferent coupling): direct imports of this module
- A  (abstractness): contract types / all types
- I  (instability): Ce / (Ce + Ca)
- D  (distance from the main sequence): |A + I - 1|

The universe may be larger than the graph, e.g. when standard modules are
hidden from the displayed graph but still count as dependents.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from loguru import logger

from ..core.models import Module
from .declarations import DeclStat
from .graph import Graph


def abstractness(stat: DeclStat) -> float:
    """Fraction of type declarations that are contracts (0 when no types)."""
    if stat.all_types > 0:
        return stat.contract_types / stat.all_types
    return 0.0


def instability(ca: float, ce: float) -> float:
    """Ce / (Ce + Ca), or 0 for a module with no coupling at all."""
    total = ca + ce
    if total > 0:
        return ce / total
    return 0.0


def distance(a: float, i: float) -> float:
    """Distance from the main sequence: |A + I - 1|."""
    return abs(a + i - 1)


def count_importers(universe: Iterable[Module]) -> Counter[str]:
    """Count, per module id, the universe modules importing it.

    Self imports are not counted.
    """
    importers: Counter[str] = Counter()
    for module in universe:
        for imported_id in module.imported_ids:
            if imported_id != module.id:
                importers[imported_id] += 1
    return importers


def compute_metrics(graph: Graph, universe: Iterable[Module] | None = None) -> None:
    """Compute Ca, Ce, A, I and D for every node of ``graph``.

    Values are recomputed from scratch; calling this twice yields the same
    result.

    Args:
        graph: Built graph
        universe: Every module considered for afferent coupling; defaults
            to the graph's own modules. Duplicate ids are counted once.
    """
    if universe is None:
        universe = graph.modules

    unique: dict[str, Module] = {}
    for module in universe:
        unique.setdefault(module.id, module)
    importers = count_importers(unique.values())

    for node in graph.sorted_nodes:
        node.ca = float(importers.get(node.id, 0))
        node.ce = float(len(node.module.imported_ids))
        node.a = abstractness(node.decl_stat)
        node.i = instability(node.ca, node.ce)
        node.d = distance(node.a, node.i)

    logger.debug(
        f"Computed coupling metrics for {len(graph)} nodes "
        f"(universe of {len(unique)} modules)"
    )
