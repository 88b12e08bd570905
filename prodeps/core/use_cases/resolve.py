"""
Resolve use case — the production dependency closure of a workspace.

Ties together config, the per-folder pipeline, and the distro overlay.
The primary folder runs first; the overlay, when present, runs second
and is best-effort: its failures become warnings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from prodeps.core.context import get_repo_root
from prodeps.core.errors import ResolverError, SourceUnavailable, TreeParseError
from prodeps.core.models.config import ResolverConfig
from prodeps.core.services.overlay import find_overlay, merge_paths, overlay_root
from prodeps.core.services.pipeline import resolve_workspace

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """Result of the resolve use case."""

    workspace: Path | None = None
    repo_root: Path | None = None
    paths: list[str] = field(default_factory=list)
    primary_count: int = 0
    overlay_root: Path | None = None
    overlay_count: int = 0
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    output_excerpt: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            if self.output_excerpt is not None:
                result["output_excerpt"] = self.output_excerpt
            return result

        result["workspace"] = str(self.workspace)
        result["repo_root"] = str(self.repo_root)
        result["paths"] = list(self.paths)
        result["primary_count"] = self.primary_count
        result["overlay_root"] = str(self.overlay_root) if self.overlay_root else None
        result["overlay_count"] = self.overlay_count
        if self.warnings:
            result["warnings"] = list(self.warnings)
        return result


def effective_repo_root(
    workspace: Path,
    repo_root: Path | None = None,
    config: ResolverConfig | None = None,
) -> Path:
    """Pick the repo root: explicit > config > process context > workspace."""
    if repo_root is not None:
        return repo_root
    if config is not None and config.repo_root:
        return Path(config.repo_root)
    return get_repo_root() or workspace


def run_resolve(
    workspace: Path,
    repo_root: Path | None = None,
    config: ResolverConfig | None = None,
    overlay: bool = True,
) -> ResolveResult:
    """Resolve the production dependency paths of *workspace*.

    Args:
        workspace: Folder whose production closure is computed.
        repo_root: Repository root for the overlay rule (default: see
            ``effective_repo_root``).
        config: Resolver settings (default: built-in defaults).
        overlay: Whether to look for a distro overlay at all.

    Returns:
        ResolveResult; ``error`` is set when the primary folder fails.
    """
    config = config or ResolverConfig()
    result = ResolveResult(workspace=workspace)
    result.repo_root = effective_repo_root(workspace, repo_root, config)

    try:
        primary = resolve_workspace(workspace, config)
    except ResolverError as e:
        logger.debug("Resolution failed for %s: %s", workspace, e)
        result.error = str(e)
        if isinstance(e, TreeParseError):
            result.output_excerpt = e.excerpt()
        return result

    result.primary_count = len(primary.paths)
    result.warnings.extend(primary.warnings)
    overlay_paths: list[str] = []

    if overlay and config.overlay:
        candidate = find_overlay(workspace, result.repo_root, config.overlay_dir)
        if candidate is None:
            logger.debug(
                "No overlay at %s",
                overlay_root(workspace, result.repo_root, config.overlay_dir),
            )
        else:
            logger.info("Merging distro overlay %s", candidate)
            result.overlay_root = candidate
            try:
                secondary = resolve_workspace(candidate, config)
            except (SourceUnavailable, TreeParseError) as e:
                message = f"Overlay skipped: {e}"
                logger.warning("%s", message)
                result.warnings.append(message)
            else:
                overlay_paths = secondary.paths
                result.overlay_count = len(overlay_paths)
                result.warnings.extend(secondary.warnings)

    result.paths = merge_paths(primary.paths, overlay_paths)
    logger.info("%d production paths for %s", len(result.paths), workspace)
    return result
