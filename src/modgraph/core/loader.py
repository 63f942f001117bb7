"""Python source loader.

Turns a directory of Python sources into ``Module`` records: dotted module
ids, resolved direct imports, tagged top-level declarations, and the
contract / concrete type descriptors used by structural coupling.

A class is a contract when it derives from ``Protocol`` or ``ABC`` (or uses
``ABCMeta``) and its body holds nothing but method stubs, docstrings and
``...``/``pass``. Every other class is a concrete type whose method set is
its own methods plus those inherited from classes of the same module.
"""

from __future__ import annotations

import ast
import fnmatch
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ..config.defaults import (
    ABSTRACT_DECORATORS,
    CONTRACT_BASES,
    CONTRACT_METACLASSES,
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
)
from .exceptions import LoaderError
from .models import ConcreteType, ContractType, Declaration, DeclKind, Module


@dataclass
class LoadResult:
    """Modules loaded from a source root.

    Attributes:
        root: Source root that was scanned
        modules: Loaded modules in id order
        errors: Parse / read failures by module id; those modules are
            still present, without declarations or type information
    """

    root: Path
    modules: list[Module] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


def dotted_name(node: ast.expr) -> str | None:
    """Render ``a.b.c`` style expressions; ``None`` for anything else."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        parent = dotted_name(node.value)
        return f"{parent}.{node.attr}" if parent else None
    if isinstance(node, ast.Subscript):
        # Protocol[T], Generic[T]
        return dotted_name(node.value)
    if isinstance(node, ast.Call):
        return dotted_name(node.func)
    return None


def is_ignored(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def discover_sources(
    root: Path,
    exclude: Iterable[str] = (),
    extensions: Iterable[str] = DEFAULT_FILE_EXTENSIONS,
) -> dict[str, Path]:
    """Map dotted module ids to source files under ``root``.

    ``pkg/__init__.py`` becomes ``pkg``; ``pkg/mod.py`` becomes ``pkg.mod``.
    Hidden directories and ignored patterns are skipped.
    """
    patterns = [*DEFAULT_IGNORE_PATTERNS, *exclude]
    suffixes = set(extensions)
    sources: dict[str, Path] = {}

    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix not in suffixes:
            continue
        rel_parts = path.relative_to(root).parts
        if any(p.startswith(".") or is_ignored(p, patterns) for p in rel_parts[:-1]):
            continue

        parts = list(rel_parts[:-1])
        if path.stem != "__init__":
            parts.append(path.stem)
        if not parts or not all(p.isidentifier() for p in parts):
            continue
        sources[".".join(parts)] = path

    return sources


def _package_of(module_id: str, is_package: bool) -> str:
    if is_package:
        return module_id
    return module_id.rpartition(".")[0]


def resolve_imports(
    tree: ast.Module,
    module_id: str,
    is_package: bool,
    known_ids: frozenset[str],
) -> frozenset[str]:
    """Resolve the direct imports of a parsed module to module ids.

    ``from a import b`` resolves to ``a.b`` when that is a known module and
    to ``a`` otherwise. Relative imports are resolved against the module's
    package; imports climbing above the root are dropped. Self imports and
    ``__future__`` are never reported.
    """
    package = _package_of(module_id, is_package)
    imported: set[str] = set()

    for stmt in ast.walk(tree):
        if isinstance(stmt, ast.Import):
            for alias in stmt.names:
                imported.add(alias.name)
        elif isinstance(stmt, ast.ImportFrom):
            if stmt.level:
                base_parts = package.split(".") if package else []
                if stmt.level - 1 > len(base_parts):
                    continue
                base_parts = base_parts[: len(base_parts) - (stmt.level - 1)]
                if stmt.module:
                    base_parts.append(stmt.module)
                base = ".".join(base_parts)
            else:
                base = stmt.module or ""

            for alias in stmt.names:
                candidate = f"{base}.{alias.name}" if base else alias.name
                if candidate in known_ids:
                    imported.add(candidate)
                elif base:
                    imported.add(base)

    # __future__ is a compiler directive, not a dependency
    imported -= {module_id, "", "__future__"}
    return frozenset(imported)


def _is_docstring_or_stub(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    if isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Constant):
        return isinstance(stmt.value.value, str) or stmt.value.value is Ellipsis
    if isinstance(stmt, ast.Raise) and stmt.exc is not None:
        return dotted_name(stmt.exc) == "NotImplementedError"
    return False


def _is_abstract_method(func: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
    if any(dotted_name(d) in ABSTRACT_DECORATORS for d in func.decorator_list):
        return True
    return all(_is_docstring_or_stub(s) for s in func.body)


def is_contract_class(cls: ast.ClassDef) -> bool:
    """Whether a class declares a pure behavioral contract.

    Examples:
        >>> tree = ast.parse("class Reader(Protocol):\\n    def read(self): ...")
        >>> is_contract_class(tree.body[0])
        True
    """
    bases = {dotted_name(b) for b in cls.bases}
    metaclasses = {
        dotted_name(k.value) for k in cls.keywords if k.arg == "metaclass"
    }
    if not (bases & CONTRACT_BASES or metaclasses & CONTRACT_METACLASSES):
        return False

    for stmt in cls.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if not _is_abstract_method(stmt):
                return False
        elif not _is_docstring_or_stub(stmt):
            return False
    return True


def _method_names(cls: ast.ClassDef) -> set[str]:
    return {
        stmt.name
        for stmt in cls.body
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
    }


def _inherited_methods(
    cls: ast.ClassDef, classes: dict[str, ast.ClassDef], seen: set[str]
) -> set[str]:
    methods = _method_names(cls)
    for base in cls.bases:
        name = dotted_name(base)
        if name in classes and name not in seen:
            seen.add(name)
            methods |= _inherited_methods(classes[name], classes, seen)
    return methods


def _explicit_exports(tree: ast.Module) -> set[str] | None:
    for stmt in tree.body:
        if not isinstance(stmt, ast.Assign):
            continue
        if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in stmt.targets):
            continue
        if isinstance(stmt.value, (ast.List, ast.Tuple)):
            return {
                elt.value
                for elt in stmt.value.elts
                if isinstance(elt, ast.Constant) and isinstance(elt.value, str)
            }
    return None


def _assigned_names(stmt: ast.Assign | ast.AnnAssign) -> list[str]:
    targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
    names: list[str] = []
    for target in targets:
        for node in ast.walk(target):
            if isinstance(node, ast.Name):
                names.append(node.id)
    return names


def _is_constant_name(name: str) -> bool:
    return name.isupper() and not name.startswith("__")


def extract_declarations(tree: ast.Module) -> list[Declaration]:
    """Tag every top-level statement of a module.

    The module docstring is not a declaration.
    """
    exports = _explicit_exports(tree)

    def exported(name: str) -> bool:
        if exports is not None:
            return name in exports
        return not name.startswith("_")

    body = list(tree.body)
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        if isinstance(body[0].value.value, str):
            body = body[1:]

    decls: list[Declaration] = []
    for stmt in body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            decls.append(Declaration(DeclKind.FUNCTION, stmt.name, exported(stmt.name)))
        elif isinstance(stmt, ast.ClassDef):
            decls.append(
                Declaration(
                    DeclKind.TYPE,
                    stmt.name,
                    exported(stmt.name),
                    contract=is_contract_class(stmt),
                )
            )
        elif isinstance(stmt, (ast.Assign, ast.AnnAssign)):
            names = _assigned_names(stmt)
            name = names[0] if len(names) == 1 else ""
            if names and all(_is_constant_name(n) for n in names):
                kind = DeclKind.CONSTANT
            else:
                kind = DeclKind.VARIABLE
            decls.append(Declaration(kind, name, bool(name) and exported(name)))
        else:
            decls.append(Declaration(DeclKind.OTHER))
    return decls


def extract_types(
    tree: ast.Module,
) -> tuple[tuple[ContractType, ...], tuple[ConcreteType, ...]]:
    """Build contract and concrete type descriptors for top-level classes."""
    classes = {s.name: s for s in tree.body if isinstance(s, ast.ClassDef)}
    contracts: list[ContractType] = []
    concretes: list[ConcreteType] = []

    for name, cls in classes.items():
        if is_contract_class(cls):
            contracts.append(ContractType(name, frozenset(_method_names(cls))))
        else:
            methods = _inherited_methods(cls, classes, {name})
            concretes.append(ConcreteType(name, frozenset(methods)))

    return tuple(contracts), tuple(concretes)


def load_module(module_id: str, path: Path, known_ids: frozenset[str]) -> Module:
    """Parse one source file into a ``Module``.

    Raises:
        SyntaxError: The source does not parse
        OSError: The file cannot be read
        UnicodeDecodeError: The file is not valid UTF-8
    """
    source = path.read_text(encoding="utf-8")
    tree = ast.parse(source, filename=str(path))
    contracts, concretes = extract_types(tree)
    return Module(
        id=module_id,
        imported_ids=resolve_imports(tree, module_id, path.stem == "__init__", known_ids),
        declarations=tuple(extract_declarations(tree)),
        contract_types=contracts,
        concrete_types=concretes,
        path=str(path),
    )


def load_modules(root: Path | str, *, exclude: Iterable[str] = ()) -> LoadResult:
    """Load every Python module under ``root``.

    Args:
        root: Source root; module ids are dotted paths relative to it
        exclude: Extra directory name patterns to skip

    Returns:
        LoadResult with modules sorted by id

    Raises:
        LoaderError: If ``root`` does not exist or is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise LoaderError(
            f"Source root is not a directory: {root}", context={"root": str(root)}
        )

    sources = discover_sources(root, exclude)
    known_ids = frozenset(sources)
    result = LoadResult(root=root)
    logger.debug(f"Discovered {len(sources)} modules under {root}")

    for module_id, path in sorted(sources.items()):
        try:
            module = load_module(module_id, path, known_ids)
        except (SyntaxError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to parse {path}: {e}")
            result.errors[module_id] = str(e)
            module = Module(
                id=module_id,
                contract_types=None,
                concrete_types=None,
                path=str(path),
            )
        result.modules.append(module)

    return result
