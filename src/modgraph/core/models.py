"""Input records consumed by the graph engine.

A ``Module`` is produced by a loader (see ``modgraph.core.loader``) and is
treated as immutable by every analysis phase. Declarations are tagged once
at the load boundary; the engine never inspects source code.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class DeclKind(str, Enum):
    """Kind of a top-level declaration."""

    FUNCTION = "function"
    TYPE = "type"
    CONSTANT = "constant"
    VARIABLE = "variable"
    OTHER = "other"


@dataclass(frozen=True)
class Declaration:
    """A single top-level declaration of a module.

    Attributes:
        kind: Declaration kind
        name: Declared name (empty for anonymous statements)
        exported: Whether the name is publicly visible
        contract: For type declarations, whether the type is a pure
            behavioral contract (method signatures only, no data)
    """

    kind: DeclKind
    name: str = ""
    exported: bool = False
    contract: bool = False


@dataclass(frozen=True)
class ContractType:
    """Behavioral contract: a named set of required operations."""

    name: str
    methods: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        """An empty contract matches everything and carries no coupling."""
        return not self.methods


@dataclass(frozen=True)
class ConcreteType:
    """Concrete type with its method sets.

    Attributes:
        name: Type name
        methods: Operations available on a value of the type
        reference_methods: Operations only available through a reference
            to the type
    """

    name: str
    methods: frozenset[str] = field(default_factory=frozenset)
    reference_methods: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Module:
    """A unit of source code with resolved imports and declarations.

    ``contract_types`` / ``concrete_types`` are ``None`` when type
    information could not be resolved for the module; such modules are
    skipped by the structural coupling phase.
    """

    id: str
    imported_ids: frozenset[str] = field(default_factory=frozenset)
    declarations: tuple[Declaration, ...] = ()
    contract_types: tuple[ContractType, ...] | None = ()
    concrete_types: tuple[ConcreteType, ...] | None = ()
    path: str | None = None

    @property
    def has_type_info(self) -> bool:
        return self.contract_types is not None and self.concrete_types is not None

    def qualifying_contracts(self) -> tuple[ContractType, ...]:
        """Contracts exposing at least one required operation."""
        if self.contract_types is None:
            return ()
        return tuple(c for c in self.contract_types if not c.is_empty)


def make_module(
    module_id: str,
    imports: Iterable[str] = (),
    declarations: Iterable[Declaration] = (),
    contract_types: Iterable[ContractType] | None = (),
    concrete_types: Iterable[ConcreteType] | None = (),
    path: str | None = None,
) -> Module:
    """Build a ``Module`` from plain iterables.

    Examples:
        >>> m = make_module("a", imports=["b", "c"])
        >>> sorted(m.imported_ids)
        ['b', 'c']
    """
    return Module(
        id=module_id,
        imported_ids=frozenset(imports),
        declarations=tuple(declarations),
        contract_types=None if contract_types is None else tuple(contract_types),
        concrete_types=None if concrete_types is None else tuple(concrete_types),
        path=path,
    )
