"""Unit tests for the Python source loader."""

import ast
from textwrap import dedent

import pytest
from conftest import write_project

from modgraph.core.exceptions import LoaderError
from modgraph.core.loader import (
    discover_sources,
    extract_declarations,
    extract_types,
    is_contract_class,
    load_modules,
    resolve_imports,
)
from modgraph.core.models import DeclKind


def parse(source: str) -> ast.Module:
    return ast.parse(dedent(source))


class TestDiscoverSources:
    """Test module id discovery."""

    def test_sample_project_ids(self, sample_project):
        """Test packages map to dotted ids."""
        assert sorted(discover_sources(sample_project)) == [
            "base",
            "compat",
            "handler",
            "schema",
            "service",
        ]

    def test_nested_modules(self, tmp_path):
        """Test submodules and packages get dotted ids."""
        write_project(
            tmp_path,
            {
                "pkg/__init__.py": "",
                "pkg/io.py": "",
                "pkg/sub/__init__.py": "",
                "pkg/sub/util.py": "",
                "top.py": "",
            },
        )
        assert sorted(discover_sources(tmp_path)) == [
            "pkg",
            "pkg.io",
            "pkg.sub",
            "pkg.sub.util",
            "top",
        ]

    def test_ignored_directories(self, tmp_path):
        """Test caches, environments and hidden directories are skipped."""
        write_project(
            tmp_path,
            {
                "app.py": "",
                "__pycache__/app.py": "",
                ".venv/lib.py": "",
                ".hidden/mod.py": "",
                "build/gen.py": "",
            },
        )
        assert list(discover_sources(tmp_path)) == ["app"]

    def test_extra_exclude_patterns(self, tmp_path):
        """Test user patterns are applied to directory names."""
        write_project(tmp_path, {"app.py": "", "fixtures/data.py": ""})
        assert list(discover_sources(tmp_path, exclude=["fix*"])) == ["app"]

    def test_non_identifier_paths_skipped(self, tmp_path):
        """Test files that cannot be imported by name are skipped."""
        write_project(tmp_path, {"my-script.py": "", "ok.py": "", "notes.txt": ""})
        assert list(discover_sources(tmp_path)) == ["ok"]


class TestResolveImports:
    """Test import resolution."""

    def test_plain_and_from_imports(self):
        """Test import and from-import statements resolve to module ids."""
        tree = parse(
            """
            import os
            import pkg.io as io
            from typing import Protocol
            from pkg import util
            """
        )
        known = frozenset({"pkg", "pkg.io", "pkg.util"})

        assert resolve_imports(tree, "app", False, known) == {
            "os",
            "pkg.io",
            "typing",
            "pkg.util",
        }

    def test_from_import_of_name(self):
        """Test importing a name resolves to its module."""
        tree = parse("from pkg import Thing")
        assert resolve_imports(tree, "app", False, frozenset({"pkg"})) == {"pkg"}

    def test_relative_imports_in_module(self):
        """Test relative imports resolve against the enclosing package."""
        tree = parse(
            """
            from . import util
            from .sub import helper
            from .. import shared
            """
        )
        known = frozenset({"pkg.core.util", "pkg.core.sub", "pkg.shared"})

        assert resolve_imports(tree, "pkg.core.mod", False, known) == {
            "pkg.core.util",
            "pkg.core.sub",
            "pkg.shared",
        }

    def test_relative_imports_in_package(self):
        """Test a package's __init__ resolves relative to itself."""
        tree = parse("from .mod import run")
        assert resolve_imports(tree, "pkg", True, frozenset({"pkg.mod"})) == {"pkg.mod"}

    def test_relative_import_above_root_dropped(self):
        """Test imports climbing above the source root are ignored."""
        tree = parse("from ... import far")
        assert resolve_imports(tree, "pkg.mod", False, frozenset()) == frozenset()

    def test_self_and_future_imports_dropped(self):
        """Test self imports and __future__ never count."""
        tree = parse(
            """
            from __future__ import annotations
            import app
            import json
            """
        )
        assert resolve_imports(tree, "app", False, frozenset({"app"})) == {"json"}

    def test_nested_imports_counted(self):
        """Test imports inside functions are dependencies too."""
        tree = parse(
            """
            def load():
                import yaml
                return yaml
            """
        )
        assert resolve_imports(tree, "app", False, frozenset()) == {"yaml"}


class TestContractDetection:
    """Test is_contract_class()."""

    @pytest.mark.parametrize(
        "source",
        [
            "class R(Protocol):\n    def read(self): ...",
            "class R(typing.Protocol):\n    '''Doc.'''\n    def read(self):\n        '''Doc.'''",
            "class R(ABC):\n    @abstractmethod\n    def read(self):\n        return 1",
            "class R(metaclass=ABCMeta):\n    def read(self):\n        raise NotImplementedError()",
            "class R(Protocol[T]):\n    def read(self) -> T: ...",
        ],
    )
    def test_contracts(self, source):
        """Test pure method-stub classes on contract bases are contracts."""
        assert is_contract_class(parse(source).body[0])

    @pytest.mark.parametrize(
        "source",
        [
            "class R:\n    def read(self): ...",
            "class R(Protocol):\n    size: int\n    def read(self): ...",
            "class R(ABC):\n    def read(self):\n        return 1",
            "class R(Base):\n    pass",
        ],
    )
    def test_non_contracts(self, source):
        """Test data, concrete methods or foreign bases disqualify a class."""
        assert not is_contract_class(parse(source).body[0])


class TestExtractDeclarations:
    """Test declaration tagging."""

    def test_kinds(self):
        """Test each top-level statement gets one declaration."""
        decls = extract_declarations(
            parse(
                '''
                """Module docstring."""
                import os

                LIMIT = 10
                state = {}
                _cache: dict = {}


                def run(): ...


                async def serve(): ...


                class Reader(Protocol):
                    def read(self): ...


                class _Impl:
                    pass
                '''
            )
        )

        assert [(d.kind, d.name, d.exported, d.contract) for d in decls] == [
            (DeclKind.OTHER, "", False, False),
            (DeclKind.CONSTANT, "LIMIT", True, False),
            (DeclKind.VARIABLE, "state", True, False),
            (DeclKind.VARIABLE, "_cache", False, False),
            (DeclKind.FUNCTION, "run", True, False),
            (DeclKind.FUNCTION, "serve", True, False),
            (DeclKind.TYPE, "Reader", True, True),
            (DeclKind.TYPE, "_Impl", False, False),
        ]

    def test_all_controls_exports(self):
        """Test __all__ overrides the underscore convention."""
        decls = extract_declarations(
            parse(
                """
                __all__ = ["_public"]

                def _public(): ...

                def hidden(): ...
                """
            )
        )
        exported = {d.name: d.exported for d in decls if d.kind == DeclKind.FUNCTION}
        assert exported == {"_public": True, "hidden": False}

    def test_tuple_assignment(self):
        """Test multi-name assignments are one unnamed declaration."""
        decls = extract_declarations(parse("A, B = 1, 2\nx, Y = 1, 2"))
        assert [(d.kind, d.name) for d in decls] == [
            (DeclKind.CONSTANT, ""),
            (DeclKind.VARIABLE, ""),
        ]


class TestExtractTypes:
    """Test contract and concrete type descriptors."""

    def test_inherited_methods(self):
        """Test concrete types include methods of same-module bases."""
        contracts, concretes = extract_types(
            parse(
                """
                class Closer(Protocol):
                    def close(self): ...

                class Base:
                    def close(self): ...

                class File(Base):
                    def read(self): ...
                """
            )
        )

        assert [(c.name, c.methods) for c in contracts] == [
            ("Closer", frozenset({"close"}))
        ]
        by_name = {c.name: c.methods for c in concretes}
        assert by_name == {
            "Base": frozenset({"close"}),
            "File": frozenset({"read", "close"}),
        }


class TestLoadModules:
    """Test load_modules() on a source tree."""

    def test_sample_project(self, sample_project):
        """Test imports, declarations and types of the sample project."""
        result = load_modules(sample_project)
        modules = {m.id: m for m in result.modules}

        assert [m.id for m in result.modules] == sorted(modules)
        assert result.errors == {}
        assert modules["base"].imported_ids == {"typing"}
        assert modules["service"].imported_ids == {"typing", "base", "schema"}
        assert modules["handler"].imported_ids == {"base", "service"}
        assert modules["compat"].imported_ids == frozenset()

        assert {c.name for c in modules["base"].contract_types} == {"Reader", "Writer"}
        assert {c.name for c in modules["base"].concrete_types} == {"Config"}
        assert {c.name for c in modules["compat"].concrete_types} == {
            "ByteReader",
            "ByteWriter",
        }
        assert modules["base"].path.endswith("__init__.py")

    def test_syntax_error_is_not_fatal(self, tmp_path):
        """Test unparsable files are kept without type information."""
        write_project(tmp_path, {"good.py": "import bad\n", "bad.py": "def (:\n"})
        result = load_modules(tmp_path)
        modules = {m.id: m for m in result.modules}

        assert set(modules) == {"bad", "good"}
        assert "bad" in result.errors
        assert not modules["bad"].has_type_info
        assert modules["good"].imported_ids == {"bad"}

    def test_exclude(self, sample_project):
        """Test exclude patterns remove directories."""
        result = load_modules(sample_project, exclude=["compat"])
        assert "compat" not in {m.id for m in result.modules}

    def test_missing_root(self, tmp_path):
        """Test a missing root raises LoaderError."""
        with pytest.raises(LoaderError) as exc_info:
            load_modules(tmp_path / "missing")

        assert exc_info.value.context["root"].endswith("missing")

    def test_file_root(self, tmp_path):
        """Test a file root raises LoaderError."""
        path = tmp_path / "mod.py"
        path.write_text("", encoding="utf-8")

        with pytest.raises(LoaderError):
            load_modules(path)
