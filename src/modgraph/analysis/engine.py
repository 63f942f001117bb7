"""Analysis run orchestration.

Phases always run in order: build, then coupling metrics, then (optionally)
structural coupling. ``AnalysisResult.phases`` records which phases ran, so
callers can tell "no structural coupling" from "not computed".
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from ..config.settings import AnalysisConfig
from ..core.baseline import StandardBaseline, subtract
from ..core.models import Module
from ..core.oracle import CompatibilityOracle
from .graph import Graph, build_graph
from .issues import AnalysisIssue
from .metrics import compute_metrics
from .structural import compute_structural_coupling


class Phase(str, Enum):
    """Analysis phases."""

    BUILD = "build"
    METRICS = "metrics"
    STRUCTURAL = "structural"


@dataclass
class AnalysisResult:
    """Graph produced by an analysis run.

    Attributes:
        graph: Built graph with metrics
        phases: Phases that ran
        universe_size: Number of modules considered for afferent coupling
    """

    graph: Graph
    phases: frozenset[Phase]
    universe_size: int

    @property
    def issues(self) -> list[AnalysisIssue]:
        return self.graph.issues

    @property
    def structural(self) -> bool:
        return Phase.STRUCTURAL in self.phases


def analyze(
    modules: Iterable[Module],
    *,
    universe: Iterable[Module] | None = None,
    config: AnalysisConfig | None = None,
    baseline: StandardBaseline | None = None,
    oracle: CompatibilityOracle | None = None,
) -> AnalysisResult:
    """Run the analysis phases over a loaded module set.

    Args:
        modules: Loaded modules
        universe: Modules counted for afferent coupling; defaults to
            ``modules`` (before any baseline subtraction)
        config: Analysis configuration (defaults when omitted)
        baseline: Standard modules hidden from the graph unless
            ``config.include_std`` is set
        oracle: Compatibility oracle for the structural phase

    Returns:
        AnalysisResult with the graph and the phases that ran
    """
    config = config or AnalysisConfig()
    modules = list(modules)
    universe = list(universe) if universe is not None else modules

    displayed = modules
    if baseline is not None and not config.include_std:
        displayed = subtract(modules, baseline)
        logger.debug(f"Hid {len(modules) - len(displayed)} standard modules")

    graph = build_graph(displayed, closure_options=config.closure.to_options())
    phases = {Phase.BUILD}

    compute_metrics(graph, universe)
    phases.add(Phase.METRICS)

    if config.structural:
        compute_structural_coupling(graph, oracle, workers=config.workers)
        phases.add(Phase.STRUCTURAL)

    logger.info(
        f"Analysed {len(graph)} modules ({', '.join(sorted(p.value for p in phases))})"
    )
    return AnalysisResult(graph=graph, phases=frozenset(phases), universe_size=len(universe))
