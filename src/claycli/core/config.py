"""
Configuration and path management.

Provides project root detection and standard paths for claycli data.
Uses a .clay/ directory for project settings and backups.

Resolution order for the project root:
  1. CLAYCLI_ROOT environment variable (highest priority)
  2. Walk up from cwd looking for .clay/ directory
  3. Global config file (~/.config/claycli/config.yaml) root key
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import yaml

CLAY_DIR_NAME = ".clay"


@dataclass(frozen=True)
class ProjectPaths:
    """Standard paths for claycli data in a project."""

    root: Path
    clay_dir: Path
    config_file: Path
    backups: Path


def get_global_config_path() -> Path:
    """Return the path to the global claycli config file.

    Respects XDG_CONFIG_HOME if set, otherwise defaults to
    ~/.config/claycli/config.yaml.

    Returns:
        Path to global config file (may not exist).
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "claycli" / "config.yaml"


def load_global_config() -> dict:
    """Load the global claycli configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    config_path = get_global_config_path()
    if not config_path.is_file():
        return {}
    try:
        text = config_path.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
        if isinstance(data, dict):
            return data
        return {}
    except (OSError, yaml.YAMLError):
        return {}


def _walk_up_for_clay(start_path: Path) -> Path | None:
    """Walk up the directory tree looking for a .clay/ directory."""
    current = start_path.resolve()
    while current != current.parent:
        if (current / CLAY_DIR_NAME).is_dir():
            return current
        current = current.parent
    return None


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the project root using 3-tier resolution.

    Args:
        start_path: Starting path for the .clay/ walk (defaults to cwd)

    Returns:
        Path to project root

    Raises:
        FileNotFoundError: If no .clay/ directory is found by any method
    """
    env_root = os.environ.get("CLAYCLI_ROOT")
    if env_root:
        env_path = Path(env_root).resolve()
        if (env_path / CLAY_DIR_NAME).is_dir():
            return env_path
        raise FileNotFoundError(
            f"CLAYCLI_ROOT={env_root} does not contain a {CLAY_DIR_NAME}/ directory."
        )

    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_clay(Path(start_path))
    if result is not None:
        return result

    global_config = load_global_config()
    root_str = global_config.get("root")
    if root_str:
        global_path = Path(root_str).expanduser().resolve()
        if (global_path / CLAY_DIR_NAME).is_dir():
            return global_path
        raise FileNotFoundError(
            f"Global config root={root_str} does not contain a {CLAY_DIR_NAME}/ directory."
        )

    raise FileNotFoundError(
        f"Could not find {CLAY_DIR_NAME}/ directory starting from {start_path}. "
        f"Run 'clay init' to initialize, set CLAYCLI_ROOT, or configure "
        f"root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_project_root() -> Path:
    """Get the cached project root path."""
    return find_project_root()


def get_paths(project_root: Path | None = None) -> ProjectPaths:
    """Get all standard paths for the project.

    Args:
        project_root: Project root path (uses cached default if not provided)

    Returns:
        ProjectPaths dataclass with all paths
    """
    if project_root is None:
        project_root = get_project_root()

    project_root = Path(project_root)
    clay_dir = project_root / CLAY_DIR_NAME

    return ProjectPaths(
        root=project_root,
        clay_dir=clay_dir,
        config_file=clay_dir / "config.yaml",
        backups=clay_dir / "backups",
    )
