"""Site registry for Wordma.

Site lookups and creation on top of the Store. Name and path uniqueness is
checked with a query before inserting so the caller gets a clear error; the
UNIQUE constraints of the ``site`` table remain the authoritative check when
two callers race between the query and the insert.
"""

from __future__ import annotations

import logging
import sqlite3

from .errors import DuplicateName, DuplicatePath
from .models import Site
from .store import Store

log = logging.getLogger(__name__)

_SITE_COLUMNS = "id, name, description, path, created_at"


class SiteRegistry:
    """Creates and looks up sites.

    Attributes:
        store: Store holding the ``site`` table.
    """

    def __init__(self, store: Store):
        self.store = store

    async def create_site(
        self, name: str, description: str = "", path: str | None = None
    ) -> int:
        """Create a site and return its generated identifier.

        Args:
            name: Unique site name.
            description: Free-form description.
            path: Optional storage directory, unique across sites when set.

        Raises:
            DuplicateName: If a site already uses ``name``.
            DuplicatePath: If a site already uses ``path``.
            StoreUnavailable: If the database cannot be opened.
        """
        existing = await self.store.query(
            "SELECT name, path FROM site WHERE name = ? OR (? IS NOT NULL AND path = ?)",
            [name, path, path],
        )
        if any(row["name"] == name for row in existing):
            raise DuplicateName(name)
        if existing:
            raise DuplicatePath(path)

        try:
            result = await self.store.execute(
                "INSERT INTO site (name, description, path) VALUES (?, ?, ?)",
                [name, description, path],
            )
        except sqlite3.IntegrityError as exc:
            message = str(exc)
            if "site.name" in message:
                raise DuplicateName(name) from exc
            if "site.path" in message:
                raise DuplicatePath(path) from exc
            raise
        log.info("Created site %r with id %s", name, result.last_insert_id)
        return result.last_insert_id

    async def get_all_sites(self) -> list[Site]:
        """Return every site, most recently created first."""
        return await self.store.query(
            f"SELECT {_SITE_COLUMNS} FROM site ORDER BY created_at DESC, id DESC",
            factory=Site.from_row,
        )

    async def get_site(self, site_id: int) -> Site | None:
        rows = await self.store.query(
            f"SELECT {_SITE_COLUMNS} FROM site WHERE id = ?",
            [site_id],
            factory=Site.from_row,
        )
        return rows[0] if rows else None

    async def has_sites(self) -> bool:
        rows = await self.store.query("SELECT count(*) AS count FROM site")
        return rows[0]["count"] > 0

    async def check_site_name_exists(self, name: str) -> bool:
        rows = await self.store.query(
            "SELECT count(*) AS count FROM site WHERE name = ?", [name]
        )
        return rows[0]["count"] > 0

    async def check_site_path_exists(self, path: str) -> bool:
        rows = await self.store.query(
            "SELECT count(*) AS count FROM site WHERE path = ?", [path]
        )
        return rows[0]["count"] > 0
