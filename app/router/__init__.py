"""
Page routing: route table, navigation guard and the middleware running it.
"""

from .routes import ROUTES, Layout, RouteMatch, RouteRecord, normalize_path, resolve
from .guard import GuardState, Navigation, NavigationGuard

__all__ = [
    "ROUTES",
    "Layout",
    "RouteMatch",
    "RouteRecord",
    "normalize_path",
    "resolve",
    "GuardState",
    "Navigation",
    "NavigationGuard",
]
