"""
==============================================================================
Storefront Context
==============================================================================

Bundle of the process-wide state objects.

One context is created per application and stored on
``app.state.context``; endpoints receive its members through the
dependencies in app.core.dependencies.

    ┌───────────────────── StorefrontContext ─────────────────────┐
    │ store        RemoteStore        queries of the hosted db    │
    │ shortlist    ShortlistStore     quote selection             │
    │ toast        ToastNotifier      single notification slot    │
    │ site_config  SiteConfigLoader   load-once config cache      │
    │ guard        NavigationGuard    page access control         │
    └─────────────────────────────────────────────────────────────┘

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.config import Settings, get_settings
from app.router.guard import NavigationGuard
from app.state.shortlist import ShortlistStore
from app.state.site_config import SiteConfigLoader
from app.state.toast import Scheduler, ToastNotifier
from app.store.remote import RemoteStore


@dataclass
class StorefrontContext:
    store: RemoteStore
    shortlist: ShortlistStore
    toast: ToastNotifier
    site_config: SiteConfigLoader
    guard: NavigationGuard

    @classmethod
    def create(
        cls,
        store: RemoteStore,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[Settings] = None
    ) -> "StorefrontContext":
        """
        Wire a fresh context around ``store``.

        Args:
            store: Remote store shared by every component
            scheduler: Timer source for the toast (event loop by default)
            settings: Settings to read durations and paths from

        Returns:
            New StorefrontContext
        """
        settings = settings or get_settings()
        site_config = SiteConfigLoader(store)
        return cls(
            store=store,
            shortlist=ShortlistStore(),
            toast=ToastNotifier(
                scheduler=scheduler,
                default_duration_ms=settings.toast_duration_ms,
            ),
            site_config=site_config,
            guard=NavigationGuard(
                store,
                site_config,
                admin_prefix=settings.admin_prefix,
                login_path=settings.login_path,
            ),
        )
