"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- auth: Admin login and session presence
- catalogs: Public catalog view
- shortlist: Quote selection
- site: Site configuration and toast
- admin_products: Product administration
- admin_catalogs: Catalog administration
- admin_config: Site configuration administration

==============================================================================
"""

from . import (
    admin_catalogs,
    admin_config,
    admin_products,
    auth,
    catalogs,
    health,
    shortlist,
    site,
)

__all__ = [
    "admin_catalogs",
    "admin_config",
    "admin_products",
    "auth",
    "catalogs",
    "health",
    "shortlist",
    "site",
]
