"""
pnpm adapter — queries the pnpm toolchain for dependency trees.

Runs ``pnpm ls`` through the adapter protocol and reports the
outcome as a Receipt. Whether a non-zero exit is fatal is decided
by the caller, not here.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import time

from prodeps.adapters.base import Adapter, ExecutionContext
from prodeps.core.models.action import Receipt

logger = logging.getLogger(__name__)

LS_ARGS = ("ls", "--prod", "--json", "--depth=Infinity")


def executable_name(package_manager: str = "pnpm") -> str:
    """Platform-specific executable for the package manager."""
    if sys.platform == "win32":
        return f"{package_manager}.cmd"
    return package_manager


class PnpmAdapter(Adapter):
    """pnpm package manager adapter.

    Action params:
        operation (str): One of 'ls', 'version'.
    """

    def __init__(self, package_manager: str = "pnpm") -> None:
        self._executable = executable_name(package_manager)

    @property
    def name(self) -> str:
        return "pnpm"

    @property
    def executable(self) -> str:
        return self._executable

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def version(self) -> str | None:
        """Detect the pnpm version string."""
        try:
            result = subprocess.run(
                [self._executable, "--version"],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=5,
            )
            if result.returncode == 0:
                return result.stdout.strip()
        except (subprocess.TimeoutExpired, OSError):
            pass
        return None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        valid_ops = {"ls", "version"}
        if operation not in valid_ops:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(valid_ops))}"

        if not os.path.isdir(context.working_dir):
            return False, f"Working directory does not exist: {context.working_dir}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        valid, message = self.validate(context)
        if not valid:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=message,
            )

        operation = context.action.params["operation"]
        if operation == "version":
            ver = self.version()
            if ver:
                return Receipt.success(
                    adapter=self.name,
                    action_id=context.action.id,
                    output=ver,
                    metadata={"pnpm_version": ver},
                )
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error="Could not determine pnpm version",
            )

        return self._exec(context, [self._executable, *LS_ARGS])

    # ── Helpers ─────────────────────────────────────────────────

    def _exec(self, ctx: ExecutionContext, cmd: list[str]) -> Receipt:
        command = " ".join(cmd)
        env = {**os.environ, **ctx.env}
        logger.debug("Executing: %s (cwd=%s)", command, ctx.working_dir)
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=ctx.working_dir,
                env=env,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Cannot run {cmd[0]}: {e}",
                metadata={"command": command, "stdout": ""},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=stdout,
                duration_ms=elapsed_ms,
                metadata={"command": command, "return_code": 0, "stderr": stderr},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command,
                "return_code": result.returncode,
                "stdout": stdout,
            },
        )
