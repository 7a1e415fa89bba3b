"""Exception types for Wordma.

Every error raised by the store, the site registry and the CLI helpers
derives from WordmaError so the command line can report them uniformly.

Key classes:
- StoreUnavailable: the database file cannot be opened, created or migrated.
- DuplicateName / DuplicatePath: a site with the same name or path exists.
- NotFound: a settings key or site identifier does not resolve.
- MalformedState: a stored value does not parse as expected.
- ThemeError / DeployError: failures of the git and package-manager wrappers.
"""

from __future__ import annotations

from pathlib import Path


class WordmaError(Exception):
    """Base class for all Wordma errors."""


class StoreUnavailable(WordmaError):
    """The backing database cannot be used.

    Attributes:
        path: Location of the database file.
        reason: Human-readable cause reported by the storage engine or OS.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open database at {path}: {reason}")


class DuplicateName(WordmaError):
    """A site with this name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Site name "{name}" already exists')


class DuplicatePath(WordmaError):
    """A site with this storage path already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Site path "{path}" is already used by another site')


class NotFound(WordmaError):
    """A settings key or site identifier has no stored value."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No value stored for {key}")


class MalformedState(WordmaError):
    """A stored value cannot be parsed.

    Attributes:
        key: Settings key holding the value.
        value: The raw stored value.
    """

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"Stored value for {key} is malformed: {value!r}")


class ThemeError(WordmaError):
    """A theme command failed."""


class DeployError(WordmaError):
    """A deploy command failed."""
