"""
prodeps — CLI entrypoint.

Usage:
    python -m prodeps --help
    python -m prodeps resolve path/to/workspace --json
    python -m prodeps overlay path/to/workspace
    python -m prodeps config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from prodeps import __version__
from prodeps.core.observability.logging_config import configure_cli_logging


@click.group()
@click.version_option(version=__version__, prog_name="prodeps")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to prodeps.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """prodeps — production dependency paths of a pnpm workspace."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    configure_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


def _load_config(ctx: click.Context, start: Path):
    """Load config (explicit or discovered from *start*) and register the repo root."""
    from prodeps.core.config.loader import ConfigError, config_root, find_config_file, load_config
    from prodeps.core.context import set_repo_root

    path: Path | None = ctx.obj.get("config_path") or find_config_file(start)
    try:
        config = load_config(path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    set_repo_root(config_root(path) if path else None)
    return config, path


_workspace_arg = click.argument(
    "workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
_repo_root_opt = click.option(
    "--repo-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository root for the distro overlay rule.",
)


@cli.command()
@_workspace_arg
@_repo_root_opt
@click.option("--no-overlay", is_flag=True, help="Ignore the distro overlay folder.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as a JSON array.")
@click.pass_context
def resolve(
    ctx: click.Context,
    workspace: Path,
    repo_root: Path | None,
    no_overlay: bool,
    as_json: bool,
) -> None:
    """List the production dependency folders of WORKSPACE."""
    from prodeps.core.use_cases.resolve import run_resolve

    workspace = workspace.absolute()
    config, _ = _load_config(ctx, workspace)
    result = run_resolve(
        workspace,
        repo_root=repo_root.absolute() if repo_root else None,
        config=config,
        overlay=not no_overlay,
    )

    if not result.ok:
        # stdout carries only the path list
        click.secho(f"❌ {result.error}", fg="red", err=True)
        if result.output_excerpt:
            click.echo(f"   Output began with: {result.output_excerpt}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.paths, indent=2))
        return

    for path in result.paths:
        click.echo(path)

    if not ctx.obj.get("quiet", False):
        for warn in result.warnings:
            click.secho(f"⚠️  {warn}", fg="yellow", err=True)


@cli.command()
@_workspace_arg
@_repo_root_opt
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def overlay(ctx: click.Context, workspace: Path, repo_root: Path | None, as_json: bool) -> None:
    """Show where the distro overlay of WORKSPACE would live."""
    from prodeps.core.services.overlay import overlay_root
    from prodeps.core.use_cases.resolve import effective_repo_root

    workspace = workspace.absolute()
    config, _ = _load_config(ctx, workspace)
    root = effective_repo_root(
        workspace, repo_root.absolute() if repo_root else None, config,
    )
    candidate = overlay_root(workspace, root, config.overlay_dir)
    exists = candidate is not None and candidate.is_dir()

    if as_json:
        click.echo(json.dumps({
            "workspace": str(workspace),
            "repo_root": str(root),
            "overlay_root": str(candidate) if candidate else None,
            "exists": exists,
            "enabled": config.overlay,
        }, indent=2))
        return

    if candidate is None:
        click.secho(f"⚠️  {workspace} is outside {root}; no overlay", fg="yellow")
        return

    marker = click.style("present", fg="green") if exists else click.style("absent", fg="white")
    click.echo(f"{candidate} ({marker})")
    if not config.overlay:
        click.echo("   overlay merging is disabled in config")


@cli.group()
def config() -> None:
    """Resolver configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate prodeps.yml and show the effective settings."""
    from prodeps.adapters.base import ExecutionContext
    from prodeps.adapters.languages.pnpm import PnpmAdapter
    from prodeps.core.models.action import Action

    cfg, path = _load_config(ctx, Path.cwd())
    adapter = PnpmAdapter(cfg.package_manager)
    available = adapter.is_available()
    version = None
    if available:
        receipt = adapter.execute(ExecutionContext(
            action=Action(id="pnpm-version", adapter=adapter.name, params={"operation": "version"}),
            working_dir=str(Path.cwd()),
        ))
        version = receipt.output if receipt.ok else None

    if as_json:
        click.echo(json.dumps({
            "config_file": str(path) if path else None,
            "config": cfg.model_dump(),
            "package_manager_available": available,
            "package_manager_version": version,
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File: {path or '(defaults)'}")
    for key, value in cfg.model_dump().items():
        click.echo(f"   {key}: {value}")

    if available:
        click.echo(f"   {adapter.executable}: {version or 'unknown version'}")
    else:
        click.secho(f"⚠️  {adapter.executable} not found on PATH", fg="yellow")

    click.echo()


if __name__ == "__main__":
    cli()
