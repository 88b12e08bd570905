"""
Store path resolver — map virtual-store paths to hoisted links.

pnpm keeps every package version in a virtual store:

    <ws>/node_modules/.pnpm/<name>@<version>/node_modules/<name>

and links the packages a workspace can see at the top level:

    <ws>/node_modules/<name>

A store path becomes its hoisted path when that link exists on disk.
Otherwise (e.g. a version that lost the hoisting race) the store path
is kept. Only existence checks are performed; nothing is written.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def _segments(path: str) -> list[str]:
    parts = path.replace("\\", "/").split("/")
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def store_package_name(
    path: str,
    link_dir: str = "node_modules",
    store_marker: str = ".pnpm",
) -> tuple[str, ...] | None:
    """Package name segments of a virtual-store path, or None.

    Scoped names span two segments (``@scope/pkg``); the suffix after
    the inner link dir is returned verbatim.
    """
    parts = _segments(path)
    for i in range(len(parts) - 4):
        if parts[i] != link_dir or parts[i + 1] != store_marker:
            continue
        if not parts[i + 2] or parts[i + 3] != link_dir:
            continue
        name = parts[i + 4:]
        if not all(name):
            return None
        if name[0].startswith("@") and len(name) < 2:
            # "@scope" alone is a scope directory, not a package
            return None
        return tuple(name)
    return None


def resolve_store_paths(
    paths: Iterable[str],
    workspace: Path | str,
    link_dir: str = "node_modules",
    store_marker: str = ".pnpm",
) -> list[str]:
    """Rewrite each store path to its hoisted link where one exists."""
    link_root = Path(workspace) / link_dir
    resolved: list[str] = []
    hoisted_count = 0

    for path in paths:
        name = store_package_name(path, link_dir, store_marker)
        if name is None:
            resolved.append(path)
            continue

        hoisted = link_root.joinpath(*name)
        if hoisted.exists():
            resolved.append(str(hoisted))
            hoisted_count += 1
        else:
            logger.debug("No hoisted link for %s, keeping store path", "/".join(name))
            resolved.append(path)

    logger.debug("Hoisted %d of %d paths under %s", hoisted_count, len(resolved), link_root)
    return resolved
