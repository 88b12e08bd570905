"""
Closure collector — walk the tree and gather distinct store paths.

The tree repeats a package under every parent that depends on it,
so a node's store path is its identity. Children of a path already
seen are not walked again; this also makes the walk terminate on
dependency cycles.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from prodeps.core.models.tree import DependencyNode, WorkspaceEntry

logger = logging.getLogger(__name__)


class VisitedPathSet:
    """Insertion-ordered set of store paths."""

    def __init__(self) -> None:
        self._paths: dict[str, None] = {}

    def add(self, path: str) -> bool:
        """Insert *path*; True only on its first insertion."""
        if path in self._paths:
            return False
        self._paths[path] = None
        return True

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def to_list(self) -> list[str]:
        return list(self._paths)


def collect_closure(entries: Iterable[WorkspaceEntry]) -> VisitedPathSet:
    """Depth-first pre-order walk over every entry's dependencies."""
    visited = VisitedPathSet()
    for entry in entries:
        _walk(entry.dependencies, visited)
    logger.debug("Collected %d distinct dependency paths", len(visited))
    return visited


def _walk(dependencies: Mapping[str, DependencyNode], visited: VisitedPathSet) -> None:
    # Explicit stack of sibling iterators; deep trees would overflow recursion.
    stack: list[Iterator[DependencyNode]] = [iter(dependencies.values())]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        if not node.store_path:
            continue
        if visited.add(node.store_path) and node.children:
            stack.append(iter(node.children.values()))
