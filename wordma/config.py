"""Project configuration for Wordma.

Configuration is read from an optional ``wordma.yaml`` in the project root and
merged over DEFAULT_CONFIG. The database location can also be set with the
``WORDMA_DATABASE`` environment variable, which wins over the file.

Key functions:
- load_config: Load configuration for a project directory.
- resolve_path: Resolve a configured path against the project root.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import click
import yaml

CONFIG_FILENAME = "wordma.yaml"
DATABASE_ENV = "WORDMA_DATABASE"

DEFAULT_CONFIG = {
    "database": None,
    "themes_dir": "themes",
    "deploy_dir": ".deploy",
    "build_output": ".deploy/.temp",
    "package_manager": "pnpm",
    "theme_branches": ["main", "master"],
}


def default_database_path() -> Path:
    """Return the per-user database location (e.g. ``~/.config/wordma/wordma.db``)."""
    return Path(click.get_app_dir("wordma")) / "wordma.db"


def load_config(project_root: Path) -> dict[str, Any]:
    """Load configuration from wordma.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config = DEFAULT_CONFIG.copy()
    config_path = project_root / CONFIG_FILENAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    env_database = os.environ.get(DATABASE_ENV)
    if env_database:
        config["database"] = env_database
    if not config.get("database"):
        config["database"] = str(default_database_path())
    return config


def resolve_path(project_root: Path, value: str | os.PathLike[str]) -> Path:
    """Resolve a configured path; relative paths are taken from the project root."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return project_root / path
