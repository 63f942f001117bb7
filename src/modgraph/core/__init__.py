"""Core records and the collaborators around the graph engine."""

from .baseline import StandardBaseline, subtract
from .closure import ClosureOptions, resolve_import_closure, resolve_import_closures
from .exceptions import ConfigError, InvalidSortKeyError, LoaderError, ModGraphError
from .loader import LoadResult, load_modules
from .models import (
    ConcreteType,
    ContractType,
    Declaration,
    DeclKind,
    Module,
    make_module,
)
from .oracle import CompatibilityOracle, MethodSetOracle

__all__ = [
    "ClosureOptions",
    "CompatibilityOracle",
    "ConcreteType",
    "ConfigError",
    "ContractType",
    "DeclKind",
    "Declaration",
    "InvalidSortKeyError",
    "LoadResult",
    "LoaderError",
    "MethodSetOracle",
    "ModGraphError",
    "Module",
    "StandardBaseline",
    "load_modules",
    "make_module",
    "resolve_import_closure",
    "resolve_import_closures",
    "subtract",
]
