"""
==============================================================================
Navigation Guard
==============================================================================

Decides whether a page navigation resolves.

State Machine:
-------------

                      ┌──────────┐
                      │ PENDING  │
                      └────┬─────┘
            session or     │     admin path and
            non-admin path │     no session
              ┌────────────┴────────────┐
              ▼                         ▼
        ┌──────────┐             ┌────────────┐
        │ ALLOWED  │             │ REDIRECTED │ → login path
        └──────────┘             └────────────┘

Record redirects (``/admin`` → ``/admin/productos``) are followed before
the guard runs. Entering a public-layout page first makes sure the site
configuration is loaded.

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from app.config import get_settings
from app.core.exceptions import AppException
from app.router.routes import Layout, RouteMatch, normalize_path, resolve
from app.state.site_config import SiteConfigLoader
from app.store.remote import RemoteStore, SessionInfo


# Module logger
logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5


class GuardState(str, enum.Enum):
    """Outcome of a navigation."""

    PENDING = "pending"
    ALLOWED = "allowed"
    REDIRECTED = "redirected"

    def __str__(self) -> str:
        return self.value


@dataclass
class Navigation:
    """
    One route transition.

    Attributes:
        requested_path: Path the caller asked for
        path: Path after record redirects
        state: Guard outcome
        redirect_to: Target when REDIRECTED
        route: Resolved route (None for unknown paths)
        session: Session found during the check
    """

    requested_path: str
    path: str
    state: GuardState = GuardState.PENDING
    redirect_to: Optional[str] = None
    route: Optional[RouteMatch] = None
    session: Optional[SessionInfo] = None

    def allow(self, session: Optional[SessionInfo]) -> None:
        self.state = GuardState.ALLOWED
        self.session = session

    def redirect(self, target: str) -> None:
        self.state = GuardState.REDIRECTED
        self.redirect_to = target


class NavigationGuard:
    """
    Session gate for the admin subtree plus the public-layout hook.

    Example:
        >>> guard = NavigationGuard(store, site_config)
        >>> navigation = await guard.navigate("/admin/productos", token=None)
        >>> navigation.state, navigation.redirect_to
        (<GuardState.REDIRECTED: 'redirected'>, '/login')
    """

    def __init__(
        self,
        store: RemoteStore,
        site_config: Optional[SiteConfigLoader] = None,
        admin_prefix: Optional[str] = None,
        login_path: Optional[str] = None
    ) -> None:
        settings = get_settings()
        self._store = store
        self._site_config = site_config
        self._admin_prefix = admin_prefix or settings.admin_prefix
        self._login_path = login_path or settings.login_path

    @property
    def login_path(self) -> str:
        return self._login_path

    def requires_session(self, path: str) -> bool:
        return path.startswith(self._admin_prefix)

    async def lookup_session(self, token: Optional[str]) -> Optional[SessionInfo]:
        """Session behind ``token``; store failures count as no session."""
        try:
            return await self._store.get_session(token)
        except AppException as e:
            logger.warning(f"Session lookup failed, treating as anonymous: {e.message}")
            return None

    async def before_each(self, path: str, token: Optional[str] = None) -> Navigation:
        """Global guard run before every transition."""
        navigation = Navigation(requested_path=path, path=path)
        session = await self.lookup_session(token)

        if self.requires_session(path) and session is None:
            logger.info(f"🔒 No session for {path}, redirecting to {self._login_path}")
            navigation.redirect(self._login_path)
        else:
            navigation.allow(session)

        return navigation

    async def before_enter_public(self) -> None:
        """Load the site configuration once before public pages."""
        if self._site_config is not None and not self._site_config.is_loaded:
            await self._site_config.fetch_config()

    async def navigate(self, path: str, token: Optional[str] = None) -> Navigation:
        """
        Resolve a full navigation: record redirects, guard, route hooks.

        Returns:
            The settled Navigation (ALLOWED or REDIRECTED)
        """
        requested = normalize_path(path)
        target = self._follow_redirects(requested)

        navigation = await self.before_each(target, token)
        navigation.requested_path = requested
        if navigation.state is GuardState.REDIRECTED:
            return navigation

        navigation.route = resolve(target)
        if navigation.route is not None and navigation.route.layout is Layout.PUBLIC:
            await self.before_enter_public()

        return navigation

    @staticmethod
    def _follow_redirects(path: str) -> str:
        for _ in range(MAX_REDIRECTS):
            match = resolve(path)
            if match is None or match.record.redirect is None:
                return path
            path = match.record.redirect
        return path
