"""modgraph - module dependency graph with coupling and abstractness metrics."""

__version__ = "0.3.0"

from .core.exceptions import ModGraphError

__all__ = ["ModGraphError", "__version__"]
