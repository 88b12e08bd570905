"""
Tree source — fetch the raw production dependency tree for a folder.

Wraps the pnpm adapter. A non-zero exit is tolerated as long as the
command still printed something on stdout: package managers exit
non-zero on warnings while emitting a complete tree. No retries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from prodeps.adapters.base import ExecutionContext
from prodeps.adapters.languages.pnpm import PnpmAdapter
from prodeps.core.errors import SourceUnavailable
from prodeps.core.models.action import Action

logger = logging.getLogger(__name__)

PRODUCTION_ENV = {"NODE_ENV": "production"}


def query_production_tree(folder: Path | str, package_manager: str = "pnpm") -> str:
    """Run the production dependency query in *folder* and return its stdout.

    Raises:
        SourceUnavailable: the command failed without usable output.
    """
    adapter = PnpmAdapter(package_manager)
    context = ExecutionContext(
        action=Action(id="pnpm-ls", name="production tree", adapter=adapter.name,
                      params={"operation": "ls"}),
        working_dir=str(folder),
        env=dict(PRODUCTION_ENV),
    )
    receipt = adapter.execute(context)

    if receipt.ok:
        return receipt.output

    stdout = receipt.metadata.get("stdout") or ""
    if stdout.strip():
        logger.warning(
            "%s exited with code %s in %s; using its output anyway: %s",
            adapter.executable,
            receipt.metadata.get("return_code"),
            folder,
            receipt.error,
        )
        return stdout

    raise SourceUnavailable(str(folder), receipt.error or "no output")
