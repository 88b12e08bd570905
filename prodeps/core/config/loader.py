"""
Configuration loader — reads prodeps.yml into a ResolverConfig.

The file is optional: with none found, every setting takes its
default. It reads YAML, validates against the Pydantic schema,
and returns a typed config.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from prodeps.core.models.config import ResolverConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "prodeps.yml"


class ConfigError(Exception):
    """Raised when resolver configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for prodeps.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to prodeps.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> ResolverConfig:
    """Load and validate resolver configuration.

    Args:
        path: Explicit path to prodeps.yml. If None, defaults are returned.

    Returns:
        Validated ResolverConfig. A relative ``repo_root`` is made
        absolute against the config file's directory.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        return ResolverConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading resolver config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "prodeps" key or be flat
    if "prodeps" in data:
        data = data["prodeps"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under 'prodeps' in {path}")

    try:
        config = ResolverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid resolver configuration: {e}") from e

    if config.repo_root and not Path(config.repo_root).is_absolute():
        config.repo_root = str((path.parent / config.repo_root).resolve())

    logger.info("Loaded resolver config from %s", path)
    return config


def config_root(config_path: Path) -> Path:
    """Get the directory holding a config file."""
    return config_path.parent.resolve()
