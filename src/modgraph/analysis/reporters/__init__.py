"""Presentation helpers for analysis results.

``flatten_node()`` produces a cycle-free view of a node (graph and node
references replaced by ids) suitable for serialization; ``sort_nodes()``
orders nodes by a single metric.
"""

from __future__ import annotations

from typing import Any

from ...config.defaults import SORT_KEYS
from ...core.exceptions import InvalidSortKeyError
from ..graph import METRIC_FIELDS, Node


def flatten_node(node: Node) -> dict[str, Any]:
    """Return a serializable view of ``node``.

    Args:
        node: Graph node

    Returns:
        Dictionary with id references in place of object references
    """
    flat: dict[str, Any] = {
        "id": node.id,
        "path": node.module.path,
        "imports": sorted(node.module.imported_ids),
        "import_nodes": list(node.import_ids),
        "decl_stat": node.decl_stat.to_dict(),
        "upstream": node.upstream.to_dict(),
        "downstream": node.downstream.to_dict(),
    }
    for name in METRIC_FIELDS:
        flat[name] = getattr(node, name)
    return flat


def sort_nodes(nodes: list[Node], by: str) -> list[Node]:
    """Sort nodes by one metric, highest first.

    Ties keep the incoming order, which is id order for
    ``Graph.sorted_nodes``. ``"id"`` returns the nodes unchanged.

    Args:
        nodes: Nodes to sort (not modified)
        by: Metric name (``d``, ``ca``, ``ce``, ``a``, ``i``, ``sca``,
            ``sce``) or ``id``

    Returns:
        New sorted list

    Raises:
        InvalidSortKeyError: If ``by`` is not a known key
    """
    key = by.lower()
    if key not in SORT_KEYS:
        raise InvalidSortKeyError(
            f"Unknown sort key: {by!r} (expected one of {', '.join(SORT_KEYS)})",
            context={"sort_by": by},
        )
    if key == "id":
        return list(nodes)
    return sorted(nodes, key=lambda n: getattr(n, key), reverse=True)


__all__ = ["flatten_node", "sort_nodes"]
