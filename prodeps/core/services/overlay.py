"""
Overlay merger — fold in the distro copy of a workspace.

Release builds may stage extra npm dependencies in a parallel tree:

    <repo>/<overlay_dir>/<workspace relative to repo>

When that folder exists its production paths are appended to the
primary result. Its absence is the common case and not an error.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def overlay_root(workspace: Path, repo_root: Path, overlay_dir: str) -> Path | None:
    """Overlay folder mirroring *workspace*, or None outside the repo.

    The workspace is resolved through symlinks before being made
    relative, so a linked checkout maps to the same overlay.
    """
    real_workspace = Path(os.path.realpath(workspace))
    real_root = Path(os.path.realpath(repo_root))
    try:
        relative = real_workspace.relative_to(real_root)
    except ValueError:
        logger.debug("%s is outside repo root %s; no overlay", real_workspace, real_root)
        return None
    return real_root / overlay_dir / relative


def find_overlay(workspace: Path, repo_root: Path, overlay_dir: str) -> Path | None:
    """Overlay folder if it exists on disk."""
    candidate = overlay_root(workspace, repo_root, overlay_dir)
    if candidate is None or not candidate.is_dir():
        return None
    return candidate


def merge_paths(primary: Iterable[str], overlay: Iterable[str]) -> list[str]:
    """Union keeping first occurrence; primary paths come first."""
    return list(dict.fromkeys([*primary, *overlay]))
