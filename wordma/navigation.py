"""Navigation guard for Wordma.

Before each navigation the guard checks the site registry and decides where
the user should actually land:

- With no sites, every destination except "create site" is replaced by it.
- The landing page is replaced by the last opened site's workspace, or by the
  most recently created site when the last opened one no longer exists.
- On the first navigation after the guard is installed, a request for
  "create site" is resolved like the landing page when sites already exist.

After a navigation that lands in a site workspace, the site id is stored as
the last opened site.

The guard fails open: if the store cannot be read, the failure is logged and
the requested destination is used unchanged.
"""

from __future__ import annotations

import enum
import logging
import sqlite3
from dataclasses import dataclass, field

from .errors import StoreUnavailable
from .models import Site
from .settings import Settings
from .sites import SiteRegistry

log = logging.getLogger(__name__)

LANDING = "landing"
CREATE_SITE = "create-site"
WORKSPACE = "workspace"


class GuardState(enum.Enum):
    NO_SITES = "no-sites"
    SITES_NO_VALID_LAST_SITE = "sites-no-valid-last-site"
    SITES_VALID_LAST_SITE = "sites-valid-last-site"


@dataclass(frozen=True)
class Route:
    """A navigation destination.

    Attributes:
        name: Destination name (``landing``, ``create-site``, ``workspace``...).
        params: Route parameters; a workspace carries ``siteId`` as a string.
    """

    name: str
    params: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def landing(cls) -> Route:
        return cls(LANDING)

    @classmethod
    def create_site(cls) -> Route:
        return cls(CREATE_SITE)

    @classmethod
    def workspace(cls, site_id: int) -> Route:
        return cls(WORKSPACE, {"siteId": str(site_id)})

    @property
    def site_id(self) -> int | None:
        """Site id of a workspace route, None for other routes or bad ids."""
        if self.name != WORKSPACE:
            return None
        try:
            return int(self.params.get("siteId", ""))
        except ValueError:
            return None


class NavigationGuard:
    """Decides the actual destination of each navigation.

    Attributes:
        registry: Site registry consulted for existing sites.
        settings: Settings holding the last opened site id.
    """

    def __init__(self, registry: SiteRegistry, settings: Settings):
        self.registry = registry
        self.settings = settings
        self._first_navigation = True

    async def navigate(self, to: Route) -> Route:
        """Resolve ``to`` and record the result as a completed navigation."""
        resolved = await self.before_each(to)
        await self.after_each(resolved)
        return resolved

    async def before_each(self, to: Route) -> Route:
        """Return the destination that should be shown instead of ``to``.

        Store failures are logged and ``to`` is returned unchanged.
        """
        first = self._first_navigation
        self._first_navigation = False
        try:
            return await self._resolve(to, first)
        except (StoreUnavailable, sqlite3.Error):
            log.exception("Navigation guard failed; continuing to %s", to.name)
            return to

    async def after_each(self, route: Route) -> None:
        """Remember the site of a completed workspace navigation."""
        if route.name != WORKSPACE:
            return
        site_id = route.site_id
        if site_id is None:
            log.warning("Workspace route has invalid siteId: %r", route.params.get("siteId"))
            return
        try:
            await self.settings.set_last_site_id(site_id)
        except (StoreUnavailable, sqlite3.Error):
            log.exception("Could not remember last opened site %s", site_id)

    async def current_state(self) -> GuardState:
        sites = await self.registry.get_all_sites()
        if not sites:
            return GuardState.NO_SITES
        if await self._valid_last_site(sites) is None:
            return GuardState.SITES_NO_VALID_LAST_SITE
        return GuardState.SITES_VALID_LAST_SITE

    async def _resolve(self, to: Route, first: bool) -> Route:
        sites = await self.registry.get_all_sites()
        if not sites:
            return to if to.name == CREATE_SITE else Route.create_site()
        if to.name == LANDING or (first and to.name == CREATE_SITE):
            return await self._restore(sites)
        return to

    async def _restore(self, sites: list[Site]) -> Route:
        site_id = await self._valid_last_site(sites)
        if site_id is None:
            site_id = sites[0].id
        return Route.workspace(site_id)

    async def _valid_last_site(self, sites: list[Site]) -> int | None:
        last_id = await self.settings.get_last_site_id()
        if last_id is not None and any(site.id == last_id for site in sites):
            return last_id
        return None
