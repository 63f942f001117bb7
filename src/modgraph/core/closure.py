"""Import closure resolution.

The closure of a module is the set of module ids reachable through its
direct imports. It only feeds the upstream/downstream presentation
aggregates of the graph builder; no coupling metric reads it.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from .models import Module


@dataclass(frozen=True)
class ClosureOptions:
    """Closure resolution parameters.

    Attributes:
        include_self: Include the module itself in its own closure
        max_depth: Maximum import distance to follow (None = unbounded,
            1 = direct imports only)
    """

    include_self: bool = False
    max_depth: int | None = None


def resolve_import_closure(
    module_id: str,
    imports_by_id: dict[str, frozenset[str]],
    options: ClosureOptions | None = None,
) -> frozenset[str]:
    """Resolve the import closure of a single module.

    Ids that are imported but not part of ``imports_by_id`` are still
    returned; they simply have no imports of their own to follow.

    Args:
        module_id: Module whose closure is resolved
        imports_by_id: Direct imports per module id
        options: Closure parameters

    Returns:
        Set of reachable module ids
    """
    options = options or ClosureOptions()
    seen: set[str] = {module_id}
    reached: set[str] = set()
    queue: deque[tuple[str, int]] = deque([(module_id, 0)])

    while queue:
        current, depth = queue.popleft()
        if options.max_depth is not None and depth >= options.max_depth:
            continue
        for imported in imports_by_id.get(current, frozenset()):
            if imported == module_id:
                continue
            reached.add(imported)
            if imported not in seen:
                seen.add(imported)
                queue.append((imported, depth + 1))

    if options.include_self:
        reached.add(module_id)
    return frozenset(reached)


def resolve_import_closures(
    modules: Iterable[Module],
    options: ClosureOptions | None = None,
) -> dict[str, frozenset[str]]:
    """Resolve the import closure of every module.

    Examples:
        >>> from modgraph.core.models import make_module
        >>> mods = [make_module("a", ["b"]), make_module("b", ["c"]), make_module("c")]
        >>> sorted(resolve_import_closures(mods)["a"])
        ['b', 'c']
    """
    imports_by_id = {m.id: m.imported_ids for m in modules}
    return {
        module_id: resolve_import_closure(module_id, imports_by_id, options)
        for module_id in imports_by_id
    }
