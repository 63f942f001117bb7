"""Module dependency graph and architectural metrics.

Key Components:
    - DeclStat / classify: per-kind declaration counts
    - Graph / Node / build_graph: one node per module with import edges
      and upstream/downstream declaration aggregates
    - compute_metrics: Ca, Ce, A, I, D per node
    - compute_structural_coupling: SCa, SCe per node
    - analyze: runs the phases in order and records which ran

Example:
    modules = load_modules("src").modules
    result = analyze(modules, config=AnalysisConfig(structural=True))

    for node in sort_nodes(result.graph.sorted_nodes, "d"):
        print(node.id, node.ca, node.ce, round(node.d, 2))
"""

from .declarations import DeclStat, classify
from .engine import AnalysisResult, Phase, analyze
from .graph import Graph, Node, build_graph
from .issues import AnalysisIssue, IssueKind
from .metrics import abstractness, compute_metrics, distance, instability
from .reporters import flatten_node, sort_nodes
from .structural import compute_structural_coupling, satisfies_any

__all__ = [
    "AnalysisIssue",
    "AnalysisResult",
    "DeclStat",
    "Graph",
    "IssueKind",
    "Node",
    "Phase",
    "abstractness",
    "analyze",
    "build_graph",
    "classify",
    "compute_metrics",
    "compute_structural_coupling",
    "distance",
    "flatten_node",
    "instability",
    "satisfies_any",
    "sort_nodes",
]
