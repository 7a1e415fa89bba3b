"""Executable discovery utilities for Wordma.

Theme and deploy commands shell out to ``git`` and to the theme's package
manager. This module finds those programs on PATH or in a local
``node_modules/.bin``.

Functions:
    find_executable: Locate an executable in PATH or node_modules.
    require_executable: Same, raising when the program is missing.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .errors import WordmaError


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or local node_modules.

    Args:
        name: Name of the executable to find (e.g., 'git', 'pnpm').
        project_root: Optional directory whose node_modules/.bin is searched
            when the program is not on PATH.

    Returns:
        Full path to the executable if found, None otherwise.

    Examples:
        >>> find_executable('git')
        '/usr/bin/git'
    """
    found = shutil.which(name)
    if found:
        return found

    if project_root is not None:
        local = project_root / "node_modules" / ".bin" / name
        if local.exists():
            return str(local)

    return None


def require_executable(
    name: str,
    project_root: Path | None = None,
    error: type[WordmaError] = WordmaError,
) -> str:
    """Find an executable or raise ``error`` naming the missing program."""
    found = find_executable(name, project_root)
    if found is None:
        raise error(f"Required program '{name}' was not found on PATH")
    return found
