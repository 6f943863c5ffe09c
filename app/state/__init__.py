"""
==============================================================================
Process-wide State Package
==============================================================================

State objects created once per process and shared by every request:

- ShortlistStore: product ids picked for a quote
- SiteConfigLoader: load-once cache of the site configuration
- ToastNotifier: single-slot notification with auto-dismiss

Instances are owned by app.core.context.StorefrontContext and injected
into endpoints; nothing here is a module-level global.

==============================================================================
"""

from .shortlist import ShortlistStore
from .site_config import SiteConfigLoader
from .toast import Toast, ToastKind, ToastNotifier, loop_scheduler

__all__ = [
    "ShortlistStore",
    "SiteConfigLoader",
    "Toast",
    "ToastKind",
    "ToastNotifier",
    "loop_scheduler",
]
