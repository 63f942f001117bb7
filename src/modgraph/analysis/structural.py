"""Structural coupling analysis.

Structural coupling is coupling without an import edge: a module whose
concrete types satisfy the behavioral contracts of another module depends
on that module's contracts even though it never imports it.

For every ordered pair (C, I) of distinct modules where C declares concrete
types and I declares contracts with at least one required operation:

- the pair is *satisfied* when any concrete type of C, as a value or through
  a reference, satisfies any contract of I (the search stops at the first hit)
- a satisfied pair adds 1 to ``C.sce`` unless C imports I directly
- it adds 1 to ``I.sca`` only when there is no direct import between the
  two modules in either direction; an importer of I is already one of
  I's afferent couplings

A pair contributes at most 1 to each counter no matter how many types match;
direct imports are already counted by Ce/Ca.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from loguru import logger

from ..core.models import ConcreteType, ContractType
from ..core.oracle import CompatibilityOracle, MethodSetOracle
from .graph import Graph, Node
from .issues import IssueKind


@dataclass(frozen=True)
class _ContractSide:
    node: Node
    contracts: tuple[ContractType, ...]


@dataclass(frozen=True)
class _ConcreteSide:
    node: Node
    concretes: tuple[ConcreteType, ...]


def satisfies_any(
    concretes: tuple[ConcreteType, ...],
    contracts: tuple[ContractType, ...],
    oracle: CompatibilityOracle,
) -> bool:
    """Whether any concrete type satisfies any contract.

    Each concrete type is checked as a value first and then through a
    reference; the search stops at the first satisfying pair.
    """
    for concrete in concretes:
        for contract in contracts:
            if oracle.implements(concrete, contract) or oracle.implements(
                concrete, contract, by_reference=True
            ):
                return True
    return False


def _collect_sides(graph: Graph) -> tuple[list[_ConcreteSide], list[_ContractSide]]:
    concrete_sides: list[_ConcreteSide] = []
    contract_sides: list[_ContractSide] = []

    for node in graph.sorted_nodes:
        module = node.module
        if not module.has_type_info:
            logger.debug(f"{node.id}: no type information, skipping structural analysis")
            graph.record_issue(
                IssueKind.ORACLE_UNAVAILABLE,
                node.id,
                "type information unavailable, excluded from structural coupling",
            )
            continue

        contracts = module.qualifying_contracts()
        if contracts:
            contract_sides.append(_ContractSide(node=node, contracts=contracts))
        if module.concrete_types:
            concrete_sides.append(
                _ConcreteSide(node=node, concretes=tuple(module.concrete_types))
            )

    return concrete_sides, contract_sides


def _scan_concrete_side(
    side: _ConcreteSide,
    contract_sides: list[_ContractSide],
    oracle: CompatibilityOracle,
) -> tuple[Counter[str], Counter[str]]:
    """Pair one concrete module against every contract module.

    Returns:
        (sce, sca) increments keyed by node id
    """
    sce: Counter[str] = Counter()
    sca: Counter[str] = Counter()
    concrete_node = side.node

    for other in contract_sides:
        contract_node = other.node
        if contract_node.id == concrete_node.id:
            continue
        if not satisfies_any(side.concretes, other.contracts, oracle):
            continue

        concrete_imports = concrete_node.imports_directly(contract_node.id)
        if not concrete_imports:
            sce[concrete_node.id] += 1
        if not concrete_imports and not contract_node.imports_directly(concrete_node.id):
            sca[contract_node.id] += 1

    return sce, sca


def compute_structural_coupling(
    graph: Graph,
    oracle: CompatibilityOracle | None = None,
    *,
    workers: int = 1,
) -> None:
    """Compute SCa and SCe for every node of ``graph``.

    Counters are reset before the search, so repeated calls give the same
    result. Modules without type information are left at zero and
    reported as ``oracle_unavailable`` issues on the graph.

    For a satisfied pair (C, I), where a concrete type of C satisfies a
    contract of I:

    - ``C.sce`` grows by 1 unless C imports I directly
    - ``I.sca`` grows by 1 only when neither module imports the other; a
      module importing I is already one of I's afferent couplings, and a
      contract module importing C is coupled to it through that import

    Each ordered pair adds at most 1 to either counter.

    Args:
        graph: Built graph
        oracle: Compatibility oracle (defaults to ``MethodSetOracle``)
        workers: Threads used for the outer loop over concrete modules;
            each worker accumulates its own counters, merged afterwards
    """
    oracle = oracle or MethodSetOracle()

    for node in graph.sorted_nodes:
        node.sca = 0.0
        node.sce = 0.0

    concrete_sides, contract_sides = _collect_sides(graph)
    logger.debug(
        f"Structural search: {len(concrete_sides)} concrete modules x "
        f"{len(contract_sides)} contract modules"
    )

    total_sce: Counter[str] = Counter()
    total_sca: Counter[str] = Counter()

    if workers > 1 and len(concrete_sides) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(
                    lambda side: _scan_concrete_side(side, contract_sides, oracle),
                    concrete_sides,
                )
            )
    else:
        results = [
            _scan_concrete_side(side, contract_sides, oracle) for side in concrete_sides
        ]

    for sce, sca in results:
        total_sce.update(sce)
        total_sca.update(sca)

    for node in graph.sorted_nodes:
        node.sce = float(total_sce.get(node.id, 0))
        node.sca = float(total_sca.get(node.id, 0))
