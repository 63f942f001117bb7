"""Shared fixtures for modgraph tests."""

from pathlib import Path
from textwrap import dedent

import pytest

from modgraph.core.models import (
    ConcreteType,
    ContractType,
    Declaration,
    DeclKind,
)

SAMPLE_PROJECT = {
    "base/__init__.py": '''
        """Base contracts."""

        from typing import Protocol


        class Reader(Protocol):
            """Abstract reader."""

            def read(self, size: int) -> bytes: ...


        class Writer(Protocol):
            def write(self, data: bytes) -> int: ...


        class Config:
            def __init__(self, name: str, verbose: bool = False) -> None:
                self.name = name
                self.verbose = verbose
    ''',
    "schema/__init__.py": """
        from base import Config


        class Request:
            def __init__(self, config: Config, body: bytes) -> None:
                self.config = config
                self.body = body


        class Response:
            def __init__(self, status: int, body: bytes) -> None:
                self.status = status
                self.body = body


        class Error(Exception):
            pass
    """,
    "service/__init__.py": """
        from typing import Protocol

        from base import Reader
        from schema import Request, Response


        class Handler(Protocol):
            def handle(self, request: Request) -> Response: ...


        class Registry:
            def __init__(self) -> None:
                self.readers: list[Reader] = []

            def register(self, reader: Reader) -> None:
                self.readers.append(reader)
    """,
    "handler/__init__.py": """
        from base import Config
        from service import Registry


        class Server:
            def __init__(self, registry: Registry, config: Config) -> None:
                self.registry = registry
                self.config = config

            def serve(self) -> None:
                pass


        class Client:
            def send(self, target: str) -> None:
                pass
    """,
    "compat/__init__.py": """
        class ByteReader:
            def __init__(self, data: bytes) -> None:
                self.data = data

            def read(self, size: int) -> bytes:
                chunk, self.data = self.data[:size], self.data[size:]
                return chunk


        class ByteWriter:
            def __init__(self) -> None:
                self.data = b""

            def write(self, data: bytes) -> int:
                self.data += data
                return len(data)
    """,
}


def write_project(root: Path, files: dict[str, str]) -> Path:
    """Write ``files`` (relative path -> source) under ``root``."""
    for rel_path, source in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(source).lstrip(), encoding="utf-8")
    return root


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Five-package project with one structural coupling (compat -> base)."""
    return write_project(tmp_path / "project", SAMPLE_PROJECT)


def contract(name: str, *methods: str) -> ContractType:
    return ContractType(name, frozenset(methods))


def concrete(name: str, *methods: str, reference: tuple[str, ...] = ()) -> ConcreteType:
    return ConcreteType(name, frozenset(methods), frozenset(reference))


def type_decl(name: str, *, contract: bool = False, exported: bool = True) -> Declaration:
    return Declaration(DeclKind.TYPE, name, exported=exported, contract=contract)


def func_decl(name: str) -> Declaration:
    return Declaration(DeclKind.FUNCTION, name, exported=not name.startswith("_"))
