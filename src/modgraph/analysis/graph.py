"""Module dependency graph construction.

``build_graph()`` creates one ``Node`` per module, propagates declaration
statistics along the import closure (upstream/downstream aggregates), and
materializes direct-import edges between nodes that exist in the graph.

Nodes reference each other and their graph through ids held in the
graph's ``nodes_by_id`` mapping; the node-to-graph link is a weak
reference, so the graph alone owns its nodes.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from ..core.closure import ClosureOptions, resolve_import_closures
from ..core.models import Declaration, Module
from .declarations import DeclStat, classify
from .issues import AnalysisIssue, IssueKind

METRIC_FIELDS = ("ca", "ce", "a", "i", "d", "sca", "sce")


@dataclass(eq=False)
class Node:
    """One module in the graph, with its statistics and metrics.

    Attributes:
        id: Module id
        module: Originating module record
        decl_stat: Declaration counts of this module
        upstream: Aggregate over modules importing this one
        downstream: Aggregate over this module's import closure
        import_ids: Sorted ids of directly imported nodes in the same graph
        ca: Afferent coupling
        ce: Efferent coupling
        a: Abstractness
        i: Instability
        d: Distance from the main sequence
        sca: Structural afferent coupling
        sce: Structural efferent coupling
    """

    id: str
    module: Module
    decl_stat: DeclStat = field(default_factory=DeclStat)
    upstream: DeclStat = field(default_factory=DeclStat)
    downstream: DeclStat = field(default_factory=DeclStat)
    import_ids: list[str] = field(default_factory=list)

    ca: float = 0.0
    ce: float = 0.0
    a: float = 0.0
    i: float = 0.0
    d: float = 0.0
    sca: float = 0.0
    sce: float = 0.0

    _graph_ref: weakref.ReferenceType[Graph] | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def graph(self) -> Graph | None:
        """Owning graph (lookup only)."""
        return self._graph_ref() if self._graph_ref is not None else None

    @property
    def import_nodes(self) -> list[Node]:
        """Directly imported nodes, sorted by id."""
        graph = self.graph
        if graph is None:
            return []
        return [graph.nodes_by_id[i] for i in self.import_ids]

    def imports_directly(self, module_id: str) -> bool:
        """Whether this node's module has a direct import of ``module_id``."""
        return module_id in self.module.imported_ids


class Graph:
    """Module dependency graph.

    Attributes:
        nodes_by_id: Node lookup by module id
        sorted_nodes: Nodes in ascending id order
        aggregate_stat: Sum of all node declaration stats
        issues: Non-fatal issues collected while building and analysing
    """

    def __init__(self) -> None:
        self.nodes_by_id: dict[str, Node] = {}
        self.sorted_nodes: list[Node] = []
        self.aggregate_stat = DeclStat()
        self.issues: list[AnalysisIssue] = []
        self._seen_issues: set[AnalysisIssue] = set()

    def add_node(self, node: Node) -> None:
        self.nodes_by_id[node.id] = node
        node._graph_ref = weakref.ref(self)

    def get(self, module_id: str) -> Node | None:
        return self.nodes_by_id.get(module_id)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.nodes_by_id

    def __len__(self) -> int:
        return len(self.nodes_by_id)

    def __iter__(self):
        return iter(self.sorted_nodes)

    @property
    def modules(self) -> list[Module]:
        return [n.module for n in self.sorted_nodes]

    def record_issue(self, kind: IssueKind, module_id: str, message: str) -> None:
        """Record a non-fatal issue once; repeated phases do not duplicate it."""
        issue = AnalysisIssue(kind=kind, module_id=module_id, message=message)
        if issue in self._seen_issues:
            return
        self._seen_issues.add(issue)
        self.issues.append(issue)


def sort_by_id(nodes: list[Node]) -> None:
    nodes.sort(key=lambda n: n.id)


def build_graph(
    modules: Iterable[Module],
    closures: dict[str, frozenset[str]] | None = None,
    *,
    closure_options: ClosureOptions | None = None,
) -> Graph:
    """Build a graph with one node per module.

    Args:
        modules: Modules to include in the graph
        closures: Import closure per module id; resolved from ``modules``
            with ``closure_options`` when not given
        closure_options: Parameters for closure resolution

    Returns:
        Graph with declaration stats, aggregates and direct-import edges.
        Metric fields are zero until ``compute_metrics()`` runs.
    """
    modules = list(modules)
    graph = Graph()

    for module in modules:
        if module.id in graph.nodes_by_id:
            graph.record_issue(
                IssueKind.INPUT_INCOMPLETE,
                module.id,
                "duplicate module id, keeping the first occurrence",
            )
            continue

        malformed = sum(1 for d in module.declarations if not isinstance(d, Declaration))
        if malformed:
            graph.record_issue(
                IssueKind.MALFORMED_DECLARATION,
                module.id,
                f"{malformed} declaration(s) counted as other",
            )

        node = Node(id=module.id, module=module, decl_stat=classify(module.declarations))
        graph.sorted_nodes.append(node)
        graph.add_node(node)
        graph.aggregate_stat.add(node.decl_stat)

    sort_by_id(graph.sorted_nodes)

    if closures is None:
        closures = resolve_import_closures(
            (n.module for n in graph.sorted_nodes), closure_options
        )

    # Upstream / downstream aggregates.
    for node in graph.sorted_nodes:
        for member_id in sorted(closures.get(node.id, frozenset())):
            member = graph.nodes_by_id.get(member_id)
            if member is None:
                continue
            node.downstream.add(member.decl_stat)
            member.upstream.add(node.decl_stat)

    # Direct edges.
    for node in graph.sorted_nodes:
        for imported_id in sorted(node.module.imported_ids):
            if imported_id in graph.nodes_by_id:
                node.import_ids.append(imported_id)
            else:
                logger.debug(f"{node.id}: import {imported_id} is outside the graph")
                graph.record_issue(
                    IssueKind.INPUT_INCOMPLETE,
                    node.id,
                    f"imported module {imported_id} is not in the analysed set",
                )
        node.import_ids.sort()

    logger.debug(f"Built graph with {len(graph)} nodes")
    return graph
