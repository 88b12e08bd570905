"""
Workspace pipeline — query, parse, collect, resolve for one folder.

Each call re-runs the package-manager query and re-checks the disk;
installed state may change between calls, so nothing is cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from prodeps.core.models.config import ResolverConfig
from prodeps.core.services.closure import collect_closure
from prodeps.core.services.store_paths import resolve_store_paths
from prodeps.core.services.tree_parser import parse_tree
from prodeps.core.services.tree_source import query_production_tree

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceResolution:
    """Resolved production paths of a single folder."""

    folder: Path
    entry_count: int = 0
    paths: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def resolve_workspace(folder: Path, config: ResolverConfig | None = None) -> WorkspaceResolution:
    """Run the full chain against *folder*.

    Raises:
        SourceUnavailable: the query produced no usable output.
        TreeParseError: the output could not be decoded.
    """
    config = config or ResolverConfig()
    result = WorkspaceResolution(folder=folder)

    raw = query_production_tree(folder, config.package_manager)
    entries = parse_tree(raw)
    result.entry_count = len(entries)
    if not entries:
        message = f"No workspace entries reported for {folder}"
        logger.warning("%s", message)
        result.warnings.append(message)

    visited = collect_closure(entries)
    result.paths = resolve_store_paths(
        visited,
        folder,
        link_dir=config.link_dir,
        store_marker=config.store_marker,
    )

    logger.info(
        "Resolved %d production paths from %d entries in %s",
        len(result.paths), result.entry_count, folder,
    )
    return result
