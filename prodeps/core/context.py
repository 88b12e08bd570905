"""
Repository context — the single source of truth for "which repo are we in."

The overlay rule needs to know the repository root so it can mirror a
workspace's relative position under the distro overlay directory.
The root is set ONCE at startup by whichever entry point launches:

    - CLI:    main.py   → context.set_repo_root(root)
    - Tests:  fixtures  → context.set_repo_root(tmp_path)

Design notes:
    - Module-level singleton (not a class).
    - get_repo_root() returns None when unset — the overlay service then
      falls back to the root passed in explicitly, or skips the overlay.
"""

from __future__ import annotations

from pathlib import Path


_repo_root: Path | None = None


def set_repo_root(root: Path | None) -> None:
    """Register the repository root for the current process."""
    global _repo_root
    _repo_root = root


def get_repo_root() -> Path | None:
    """Return the current repository root, or None if not yet set."""
    return _repo_root
