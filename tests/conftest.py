"""
Shared test fixtures — fake pnpm workspaces and a mocked pnpm CLI.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from prodeps.core.context import set_repo_root
from tests.fakes import completed, store_path

RUN_TARGET = "prodeps.adapters.languages.pnpm.subprocess.run"


@pytest.fixture(autouse=True)
def _reset_repo_root():
    set_repo_root(None)
    yield
    set_repo_root(None)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """CLI runs reconfigure the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A fake repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def workspace(repo: Path) -> Path:
    """An empty workspace folder inside the fake repository."""
    ws = repo / "extensions" / "sample"
    (ws / "node_modules" / ".pnpm").mkdir(parents=True)
    return ws


@pytest.fixture
def install():
    """Create a store package, optionally with its hoisted link."""

    def _install(ws: Path, name: str, version: str = "1.0.0", hoist: bool = True) -> str:
        path = store_path(ws, name, version)
        Path(path).mkdir(parents=True, exist_ok=True)
        if hoist:
            (ws / "node_modules" / name).mkdir(parents=True, exist_ok=True)
        return path

    return _install


@pytest.fixture
def mock_pnpm():
    """Patch the pnpm subprocess call.

    Register outputs per working directory with ``mock_pnpm.add(cwd, ...)``.
    Unregistered folders behave like a failing command with no output.
    """

    class _Pnpm:
        def __init__(self) -> None:
            self.outputs: dict[str, subprocess.CompletedProcess] = {}
            self.calls: list[dict] = []

        def add(self, cwd: Path, tree, rc: int = 0, stderr: str = "") -> None:
            stdout = tree if isinstance(tree, str) else json.dumps(tree)
            self.outputs[str(cwd)] = completed(stdout=stdout, stderr=stderr, rc=rc)

        def __call__(self, cmd, **kwargs):
            self.calls.append({"cmd": cmd, **kwargs})
            return self.outputs.get(
                str(kwargs.get("cwd")),
                completed(stderr="ERR_PNPM_NO_IMPORTER_MANIFEST_FOUND", rc=1),
            )

    fake = _Pnpm()
    with patch(RUN_TARGET, side_effect=fake):
        yield fake
