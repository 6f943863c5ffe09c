"""
==============================================================================
Services Package
==============================================================================

Database-backed operations behind the admin endpoints.

Modules:
--------
- auth_service: Admin login
- product_service: Product CRUD and import
- catalog_service: Catalog CRUD with slug validation
- config_service: Site configuration row

==============================================================================
"""

from .auth_service import AuthService
from .catalog_service import CatalogService
from .config_service import SiteConfigService
from .product_service import ProductService

__all__ = [
    "AuthService",
    "CatalogService",
    "ProductService",
    "SiteConfigService",
]
