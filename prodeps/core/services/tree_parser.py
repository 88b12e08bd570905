"""
Tree parser — decode ``pnpm ls --json`` output into workspace entries.

pnpm prints an array with one object per workspace package; older
versions and single-package queries print a bare object. Both decode
to a list of WorkspaceEntry.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from prodeps.core.errors import TreeParseError
from prodeps.core.models.tree import DependencyNode, WorkspaceEntry

logger = logging.getLogger(__name__)


def parse_tree(raw: str) -> list[WorkspaceEntry]:
    """Decode raw query output.

    Raises:
        TreeParseError: invalid JSON or an unexpected structure.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        raise TreeParseError(f"Invalid JSON in dependency tree: {e}", raw=raw) from e

    items = data if isinstance(data, list) else [data]

    entries: list[WorkspaceEntry] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise TreeParseError(
                f"Expected an object for workspace entry {index}, got {type(item).__name__}",
                raw=raw,
            )
        try:
            entry = WorkspaceEntry.model_validate(item)
        except ValidationError as e:
            raise TreeParseError(f"Malformed workspace entry {index}: {e}", raw=raw) from e
        _build_nodes(entry.dependencies, raw)
        entries.append(entry)

    logger.debug("Decoded %d workspace entries", len(entries))
    return entries


def _build_nodes(dependencies: dict[str, Any], raw: str) -> None:
    """Replace raw dependency mappings with DependencyNode values, in place."""
    pending = [dependencies]
    while pending:
        mapping = pending.pop()
        for key, value in mapping.items():
            if not isinstance(value, dict):
                raise TreeParseError(
                    f"Expected an object for dependency {key!r}, got {type(value).__name__}",
                    raw=raw,
                )
            try:
                node = DependencyNode.model_validate(value)
            except ValidationError as e:
                raise TreeParseError(f"Malformed dependency {key!r}: {e}", raw=raw) from e
            mapping[key] = node
            pending.append(node.children)
