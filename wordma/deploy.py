"""Deploy directory management for Wordma.

The deploy directory (``.deploy`` by default) is a clone of the repository
that hosts the built site. Theme builds are collected into it.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .config import load_config, resolve_path
from .errors import DeployError
from .executable_utils import require_executable

Confirm = Callable[[str], bool]


def require_project_root(project_root: Path) -> None:
    """Ensure ``project_root`` contains a package.json."""
    if not (project_root / "package.json").exists():
        raise DeployError(
            "Current directory is not a project root (package.json not found). "
            "Run this command from the directory containing package.json."
        )


def deploy_dir(project_root: Path, config: dict[str, Any] | None = None) -> Path:
    config = config or load_config(project_root)
    return resolve_path(project_root, config["deploy_dir"])


def init_deploy(
    project_root: Path,
    url: str,
    confirm: Confirm,
    config: dict[str, Any] | None = None,
) -> bool:
    """Clone ``url`` into the deploy directory.

    If the directory already exists, ``confirm`` is asked whether to replace
    it.

    Returns:
        True if the repository was cloned, False if the user declined.

    Raises:
        DeployError: If the project root is invalid, removal fails or the
            clone fails.
    """
    require_project_root(project_root)
    target = deploy_dir(project_root, config)
    if target.exists():
        if not confirm("Delete the existing deploy directory and initialize it again?"):
            return False
        _remove(target)

    git = require_executable("git", error=DeployError)
    try:
        subprocess.run([git, "clone", url, str(target)], cwd=project_root, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise DeployError(f"Cloning {url} failed: {exc}") from exc
    return True


def delete_deploy(
    project_root: Path, confirm: Confirm, config: dict[str, Any] | None = None
) -> bool:
    """Remove the deploy directory after confirmation.

    Returns:
        True if the directory was removed, False if it was missing or the
        user declined.
    """
    require_project_root(project_root)
    target = deploy_dir(project_root, config)
    if not target.exists():
        return False
    if not confirm("Delete the deploy directory and all of its contents?"):
        return False
    _remove(target)
    return True


def _remove(target: Path) -> None:
    try:
        shutil.rmtree(target)
    except OSError as exc:
        raise DeployError(f"Removing {target} failed: {exc}") from exc
