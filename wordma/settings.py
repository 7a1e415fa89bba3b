"""Key/value settings and the last opened site.

The ``settings`` table holds at most one row per key; writes replace the
previous value. The ``last_site_id`` key remembers which site was active so
the next session can restore it.
"""

from __future__ import annotations

import logging
import re

from .errors import MalformedState, NotFound
from .store import Store

log = logging.getLogger(__name__)

LAST_SITE_KEY = "last_site_id"


def parse_site_id(key: str, value: str | None) -> int:
    """Parse a stored site identifier.

    Raises:
        NotFound: If there is no value.
        MalformedState: If the value is not an integer.
    """
    if value is None or not value.strip():
        raise NotFound(key)
    if not re.fullmatch(r"-?[0-9]+", value.strip()):
        raise MalformedState(key, value)
    return int(value.strip())


class Settings:
    """Access to the ``settings`` table.

    Attributes:
        store: Store holding the table.
    """

    def __init__(self, store: Store):
        self.store = store

    async def get_setting(self, key: str) -> str | None:
        rows = await self.store.query("SELECT value FROM settings WHERE key = ?", [key])
        return rows[0]["value"] if rows else None

    async def set_setting(self, key: str, value: str) -> None:
        await self.store.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", [key, value]
        )

    async def get_last_site_id(self) -> int | None:
        """Return the last opened site id, or None when unset or unreadable."""
        value = await self.get_setting(LAST_SITE_KEY)
        try:
            return parse_site_id(LAST_SITE_KEY, value)
        except NotFound:
            return None
        except MalformedState as exc:
            log.debug("Ignoring %s", exc)
            return None

    async def set_last_site_id(self, site_id: int) -> None:
        await self.set_setting(LAST_SITE_KEY, str(site_id))
