"""Structural compatibility oracle.

The structural coupling analyzer asks an oracle whether a concrete type
satisfies a behavioral contract. Any object with a matching
``implements()`` method can be used; ``MethodSetOracle`` decides by
method-name coverage, which is exact for the records produced by the
Python loader.
"""

from __future__ import annotations

from typing import Protocol

from .models import ConcreteType, ContractType


class CompatibilityOracle(Protocol):
    """Decides structural compatibility between a type and a contract."""

    def implements(
        self,
        concrete: ConcreteType,
        contract: ContractType,
        *,
        by_reference: bool = False,
    ) -> bool:
        """Return True if ``concrete`` satisfies ``contract``.

        Args:
            concrete: Concrete type descriptor
            contract: Contract descriptor
            by_reference: Check the method set reachable through a reference
                to the type instead of a plain value
        """
        ...


class MethodSetOracle:
    """Method-set coverage oracle.

    A contract is satisfied when every required operation name is in the
    concrete type's method set. Through a reference, the value-level and
    reference-level methods are both available.

    Example:
        >>> oracle = MethodSetOracle()
        >>> reader = ContractType("Reader", frozenset({"read"}))
        >>> buf = ConcreteType("Buffer", reference_methods=frozenset({"read"}))
        >>> oracle.implements(buf, reader)
        False
        >>> oracle.implements(buf, reader, by_reference=True)
        True
    """

    def implements(
        self,
        concrete: ConcreteType,
        contract: ContractType,
        *,
        by_reference: bool = False,
    ) -> bool:
        method_set = concrete.methods
        if by_reference:
            method_set = method_set | concrete.reference_methods
        return contract.methods <= method_set
