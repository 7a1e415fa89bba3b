"""Record types stored by Wordma.

Sites and articles are plain dataclasses built from database rows. Timestamps
are stored as UTC text by SQLite and parsed into naive datetimes here.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an SQLite timestamp such as ``2024-01-15 10:30:00.123``.

    Returns None for empty or unparseable values.
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


@dataclass
class Site:
    """A blog tracked by name, description and storage location.

    Attributes:
        id: Identifier generated on insert.
        name: Unique display name.
        description: Free-form description, may be empty.
        path: Storage directory of the site, unique when set.
        created_at: Creation time assigned by the store.
    """

    id: int
    name: str
    description: str
    path: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Site:
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            path=row["path"],
            created_at=parse_timestamp(row["created_at"]),
        )


@dataclass
class Article:
    """A piece of content written in rich text or Markdown."""

    id: int
    title: str
    content: str
    type: str
    status: str
    summary: str | None = None
    cover: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def draft(self) -> bool:
        return self.status == "draft"

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Article:
        return cls(
            id=row["id"],
            title=row["title"],
            content=row["content"] or "",
            type=row["type"],
            status=row["status"],
            summary=row["summary"],
            cover=row["cover"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
