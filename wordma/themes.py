"""Theme management for Wordma.

Themes are git repositories cloned into the project's themes directory. Each
theme is an ordinary Node package; Wordma runs its ``dev`` and ``build``
scripts through the configured package manager and collects the build output
into the deploy directory.

Key functions:
- add_theme: Clone a theme repository.
- dev_theme: Run a theme's development server.
- build_theme: Build a theme and move its output to ``<deploy_dir>/<name>``.
- update_theme: Pull the latest theme version.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any

from .config import load_config, resolve_path
from .errors import ThemeError
from .executable_utils import require_executable

log = logging.getLogger(__name__)


def theme_name_from_url(url: str) -> str:
    """Derive a theme directory name from its repository URL.

    Examples:
        >>> theme_name_from_url("https://github.com/acme/paper-theme.git")
        'paper-theme'
    """
    name = url.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise ThemeError(f"Cannot derive a theme name from URL: {url}")
    return name


def themes_dir(project_root: Path, config: dict[str, Any] | None = None) -> Path:
    config = config or load_config(project_root)
    return resolve_path(project_root, config["themes_dir"])


def add_theme(
    project_root: Path, url: str, config: dict[str, Any] | None = None
) -> Path | None:
    """Clone a theme into the themes directory.

    Args:
        project_root: Root directory of the project.
        url: Git URL of the theme repository.
        config: Optional preloaded configuration.

    Returns:
        The theme directory, or None if a theme of that name already exists.

    Raises:
        ThemeError: If git is missing or the clone fails.
    """
    config = config or load_config(project_root)
    root = themes_dir(project_root, config)
    root.mkdir(parents=True, exist_ok=True)
    theme_dir = root / theme_name_from_url(url)
    if theme_dir.exists():
        return None

    git = require_executable("git", error=ThemeError)
    log.debug("Cloning %s into %s", url, theme_dir)
    _run([git, "clone", url, str(theme_dir)], cwd=root, action="Cloning theme")
    return theme_dir


def dev_theme(project_root: Path, name: str, config: dict[str, Any] | None = None) -> None:
    """Run the theme's ``dev`` script until it exits."""
    config = config or load_config(project_root)
    theme_dir = _package_dir(project_root, name, config)
    _run_script(theme_dir, "dev", config)


def build_theme(
    project_root: Path, name: str, config: dict[str, Any] | None = None
) -> Path | None:
    """Build a theme and collect its output.

    The theme's build writes into the build output directory (``.deploy/.temp``
    by default). After a successful build that directory is renamed to
    ``<deploy_dir>/<name>``, replacing an earlier build of the same theme.

    Returns:
        The collected output directory, or None when the build produced no
        output directory.
    """
    config = config or load_config(project_root)
    theme_dir = _package_dir(project_root, name, config)
    _run_script(theme_dir, "build", config)

    output = resolve_path(project_root, config["build_output"])
    if not output.exists():
        log.warning("Build output directory %s not found", output)
        return None
    target = resolve_path(project_root, config["deploy_dir"]) / name
    try:
        if target.exists():
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        output.rename(target)
    except OSError as exc:
        raise ThemeError(f"Collecting build output failed: {exc}") from exc
    return target


def update_theme(
    project_root: Path, name: str, config: dict[str, Any] | None = None
) -> str:
    """Pull the latest theme version.

    Each configured branch (``main`` then ``master`` by default) is tried in
    turn until a pull succeeds.

    Returns:
        The branch that was pulled.
    """
    config = config or load_config(project_root)
    theme_dir = themes_dir(project_root, config) / name
    if not theme_dir.exists():
        raise ThemeError(f'Theme "{name}" does not exist')
    if not (theme_dir / ".git").exists():
        raise ThemeError(f'Theme "{name}" is not a git repository and cannot be updated')

    git = require_executable("git", error=ThemeError)
    branches = list(config.get("theme_branches") or ["main"])
    for branch in branches:
        try:
            subprocess.run([git, "pull", "origin", branch], cwd=theme_dir, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            log.info("Pulling %s from origin/%s failed: %s", name, branch, exc)
            continue
        return branch
    raise ThemeError(
        f'Updating theme "{name}" failed for branches: {", ".join(branches)}'
    )


def _package_dir(project_root: Path, name: str, config: dict[str, Any]) -> Path:
    theme_dir = themes_dir(project_root, config) / name
    if not theme_dir.exists():
        raise ThemeError(f'Theme "{name}" does not exist')
    if not (theme_dir / "package.json").exists():
        raise ThemeError(f'Theme "{name}" has no package.json')
    return theme_dir


def _run_script(theme_dir: Path, script: str, config: dict[str, Any]) -> None:
    manager = require_executable(
        config.get("package_manager", "pnpm"), theme_dir, error=ThemeError
    )
    _run([manager, "run", script], cwd=theme_dir, action=f"Running '{script}'")


def _run(cmd: list[str], cwd: Path, action: str) -> None:
    try:
        subprocess.run(cmd, cwd=cwd, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ThemeError(f"{action} failed: {exc}") from exc
