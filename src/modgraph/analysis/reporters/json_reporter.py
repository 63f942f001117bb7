"""JSON renderer for analysis results."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from . import flatten_node, sort_nodes

if TYPE_CHECKING:
    from ..engine import AnalysisResult


def result_to_dict(result: AnalysisResult, sort_by: str = "id") -> dict[str, Any]:
    """Cycle-free dictionary view of an analysis result."""
    return {
        "phases": sorted(p.value for p in result.phases),
        "universe_size": result.universe_size,
        "aggregate": result.graph.aggregate_stat.to_dict(),
        "nodes": [flatten_node(n) for n in sort_nodes(result.graph.sorted_nodes, sort_by)],
        "issues": [issue.to_dict() for issue in result.issues],
    }


def render_json(
    result: AnalysisResult,
    sort_by: str = "id",
    output_path: Path | None = None,
) -> str:
    """Render an analysis result as formatted JSON.

    Args:
        result: Analysis result
        sort_by: Node order in the output
        output_path: If provided, write to this file

    Returns:
        JSON string
    """
    json_str = orjson.dumps(result_to_dict(result, sort_by), option=orjson.OPT_INDENT_2).decode()

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_str, encoding="utf-8")

    return json_str
