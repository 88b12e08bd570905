"""
Tests for CLI commands — resolve, overlay, config check, and global options.
"""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from prodeps.core.context import get_repo_root
from prodeps.core.services.overlay import overlay_root
from prodeps.main import cli
from tests.fakes import completed, dep, entry


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "production dependency" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    @pytest.mark.parametrize(
        ("flags", "env_level", "expected"),
        [
            (["--debug", "-v", "-q"], "CRITICAL", logging.DEBUG),
            (["-v", "-q"], "CRITICAL", logging.INFO),
            (["-q"], "CRITICAL", logging.ERROR),
            ([], "INFO", logging.INFO),
            ([], None, logging.WARNING),
        ],
    )
    def test_log_level_precedence(self, tmp_path: Path, monkeypatch, flags, env_level, expected):
        if env_level is None:
            monkeypatch.delenv("PRODEPS_LOG_LEVEL", raising=False)
        else:
            monkeypatch.setenv("PRODEPS_LOG_LEVEL", env_level)
        monkeypatch.delenv("PRODEPS_LOG_FILE", raising=False)
        runner = CliRunner()
        result = runner.invoke(cli, [*flags, "overlay", str(tmp_path), "--json"])
        assert result.exit_code == 0
        assert logging.getLogger().level == expected


class TestResolveCommand:
    def test_lists_paths(self, repo: Path, workspace: Path, install, mock_pnpm):
        a = install(workspace, "a")
        mock_pnpm.add(workspace, [entry("sample", {"a": dep(a, "a"), "x": dep("/opt/x", "x")})])
        runner = CliRunner()
        result = runner.invoke(cli, ["resolve", str(workspace), "--repo-root", str(repo)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == [str(workspace / "node_modules" / "a"), "/opt/x"]

    def test_json_array(self, repo: Path, workspace: Path, mock_pnpm):
        mock_pnpm.add(workspace, [entry("sample", {"a": dep("/A", "a"), "b": dep("/B", "b")})])
        runner = CliRunner()
        result = runner.invoke(cli, ["resolve", str(workspace), "--repo-root", str(repo), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["/A", "/B"]
        assert result.output.startswith('[\n  "/A"')

    def test_merges_overlay(self, repo: Path, workspace: Path, mock_pnpm):
        overlay = overlay_root(workspace, repo, ".build/distro/npm")
        overlay.mkdir(parents=True)
        mock_pnpm.add(workspace, [entry("sample", {"a": dep("/A", "a")})])
        mock_pnpm.add(overlay, [entry("sample", {"a": dep("/A", "a"), "c": dep("/C", "c")})])
        runner = CliRunner()
        result = runner.invoke(cli, ["resolve", str(workspace), "--repo-root", str(repo), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["/A", "/C"]

        result = runner.invoke(cli, [
            "resolve", str(workspace), "--repo-root", str(repo), "--json", "--no-overlay",
        ])
        assert json.loads(result.output) == ["/A"]

    def test_source_unavailable_exits_1(self, repo: Path, workspace: Path, mock_pnpm):
        runner = CliRunner()
        result = runner.invoke(cli, ["resolve", str(workspace), "--repo-root", str(repo)])
        assert result.exit_code == 1
        assert "unavailable" in result.output

    def test_parse_error_json_mode(self, repo: Path, workspace: Path, mock_pnpm):
        mock_pnpm.add(workspace, "<html>")
        runner = CliRunner()
        result = runner.invoke(cli, ["-q", "resolve", str(workspace), "--repo-root", str(repo), "--json"])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
        assert "Output began with: <html>" in result.output
        assert not result.output.lstrip().startswith(("[", "{"))

    def test_config_file_sets_repo_root(self, repo: Path, workspace: Path, mock_pnpm):
        (repo / "prodeps.yml").write_text("overlay: true\n")
        mock_pnpm.add(workspace, [entry("sample", {"a": dep("/A", "a")})])
        runner = CliRunner()
        result = runner.invoke(cli, ["resolve", str(workspace), "--json"])
        assert result.exit_code == 0
        assert get_repo_root() == repo.resolve()

    def test_invalid_config(self, repo: Path, workspace: Path, mock_pnpm):
        bad = repo / "bad.yml"
        bad.write_text("- not a mapping\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(bad), "resolve", str(workspace)])
        assert result.exit_code == 1
        assert "mapping" in result.output
        assert mock_pnpm.calls == []


class TestOverlayCommand:
    def test_absent(self, repo: Path, workspace: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["overlay", str(workspace), "--repo-root", str(repo), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exists"] is False
        assert data["overlay_root"].endswith(str(Path(".build/distro/npm/extensions/sample")))

    def test_present(self, repo: Path, workspace: Path):
        overlay_root(workspace, repo, ".build/distro/npm").mkdir(parents=True)
        runner = CliRunner()
        result = runner.invoke(cli, ["overlay", str(workspace), "--repo-root", str(repo)])
        assert result.exit_code == 0
        assert "present" in result.output

    def test_outside_repo(self, tmp_path: Path, repo: Path):
        outside = tmp_path / "outside"
        outside.mkdir()
        runner = CliRunner()
        result = runner.invoke(cli, ["overlay", str(outside), "--repo-root", str(repo), "--json"])
        assert json.loads(result.output)["overlay_root"] is None


class TestConfigCheck:
    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        with patch("prodeps.adapters.languages.pnpm.shutil.which", return_value=None):
            result = runner.invoke(cli, ["config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["config"]["link_dir"] == "node_modules"
        assert data["package_manager_available"] is False

    def test_human(self, tmp_path: Path, monkeypatch):
        (tmp_path / "prodeps.yml").write_text("overlay_dir: out/npm\n")
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        with patch("prodeps.adapters.languages.pnpm.shutil.which", return_value=None):
            result = runner.invoke(cli, ["config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "out/npm" in result.output

    def test_reports_version(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner = CliRunner()
        with patch("prodeps.adapters.languages.pnpm.shutil.which", return_value="/usr/bin/pnpm"), \
             patch("prodeps.adapters.languages.pnpm.subprocess.run",
                   return_value=completed(stdout="9.12.3\n")) as run:
            result = runner.invoke(cli, ["config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["package_manager_available"] is True
        assert data["package_manager_version"] == "9.12.3"
        assert run.call_args.args[0][1:] == ["--version"]
