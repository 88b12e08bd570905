"""
Resolver configuration model — loaded from prodeps.yml.

Every field has a default matching a stock pnpm layout, so the
file is optional.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ResolverConfig(BaseModel):
    """Effective settings for one resolution."""

    model_config = ConfigDict(extra="forbid")

    package_manager: str = "pnpm"
    link_dir: str = "node_modules"
    store_marker: str = ".pnpm"
    overlay_dir: str = ".build/distro/npm"
    overlay: bool = True
    repo_root: str | None = None
