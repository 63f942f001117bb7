"""Standard module baseline.

The baseline is the set of module ids treated as "standard" (the language
runtime's own library). Standard modules are hidden from the displayed graph
but still belong to the universe used for afferent coupling. Loaded modules
are matched by where their source lives, so a project module that shares a
standard name (``types``, ``logging``) stays visible.

The snapshot is read-only and lazily initialised. ``start()`` kicks the
load off on a background thread so it can overlap with module loading;
``snapshot()`` is the synchronization point and blocks until the load has
finished.
"""

from __future__ import annotations

import sys
import sysconfig
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from loguru import logger

from .models import Module


def python_stdlib_ids() -> frozenset[str]:
    """Top-level names of the running interpreter's standard library."""
    return frozenset(sys.stdlib_module_names)


def _scheme_paths(*keys: str) -> tuple[Path, ...]:
    paths = sysconfig.get_paths()
    return tuple(sorted({Path(paths[k]).resolve() for k in keys if k in paths}))


def python_stdlib_paths() -> tuple[Path, ...]:
    """Directories holding the running interpreter's standard library."""
    return _scheme_paths("stdlib", "platstdlib")


def python_site_paths() -> tuple[Path, ...]:
    """Third-party install directories, which may sit inside the stdlib tree."""
    return _scheme_paths("purelib", "platlib")


class StandardBaseline:
    """Lazily-initialised, read-only snapshot of standard module ids.

    Example:
        >>> baseline = StandardBaseline(lambda: frozenset({"os", "sys"}))
        >>> baseline.start()
        >>> baseline.is_standard("os.path")
        True
    """

    def __init__(
        self,
        loader: Callable[[], Iterable[str]] | None = None,
        stdlib_paths: Iterable[Path] | None = None,
        site_paths: Iterable[Path] | None = None,
    ) -> None:
        self._loader = loader or python_stdlib_ids
        if stdlib_paths is None:
            stdlib_paths = python_stdlib_paths()
        if site_paths is None:
            site_paths = python_site_paths()
        self._stdlib_paths = tuple(Path(p).resolve() for p in stdlib_paths)
        self._site_paths = tuple(Path(p).resolve() for p in site_paths)
        self._lock = threading.Lock()
        self._future: Future[frozenset[str]] | None = None
        self._executor: ThreadPoolExecutor | None = None

    def _load(self) -> frozenset[str]:
        ids = frozenset(self._loader())
        logger.debug(f"Loaded standard baseline with {len(ids)} module ids")
        return ids

    def _ensure_started(self) -> Future[frozenset[str]]:
        with self._lock:
            if self._future is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="modgraph-baseline"
                )
                self._future = self._executor.submit(self._load)
            return self._future

    def start(self) -> None:
        """Begin loading in the background; later calls are no-ops."""
        self._ensure_started()

    def snapshot(self) -> frozenset[str]:
        """Return the baseline ids, waiting for the background load."""
        future = self._ensure_started()
        try:
            return future.result()
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=False)

    def is_standard(self, module_id: str) -> bool:
        """Whether ``module_id`` or one of its dotted parents is standard."""
        ids = self.snapshot()
        parts = module_id.split(".")
        return any(".".join(parts[:n]) in ids for n in range(1, len(parts) + 1))

    def is_standard_module(self, module: Module) -> bool:
        """Whether ``module`` comes from the standard library.

        A module loaded from a file is standard only when that file lives in
        the interpreter's standard library directory (outside site-packages),
        so project modules named ``types`` or ``logging`` are kept. Modules
        without a path fall back to the id check of ``is_standard()``.
        """
        if module.path is None:
            return self.is_standard(module.id)

        path = Path(module.path).resolve()
        if any(path.is_relative_to(site) for site in self._site_paths):
            return False
        return any(path.is_relative_to(root) for root in self._stdlib_paths)


def subtract(modules: Iterable[Module], baseline: StandardBaseline) -> list[Module]:
    """Drop standard modules from ``modules``.

    Args:
        modules: Loaded modules
        baseline: Standard baseline to subtract

    Returns:
        Modules not covered by the baseline, in input order
    """
    return [m for m in modules if not baseline.is_standard_module(m)]
