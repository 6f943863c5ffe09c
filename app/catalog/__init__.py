"""
==============================================================================
Catalog Package - Storefront Browsing
==============================================================================

Catalog snapshot models and the per-page view model that filters, sorts
and paginates them.

Classes:
--------
- Catalog, CatalogItem, Product, ProductImage: snapshot models
- SortOrder, ViewMode: user criteria enums
- CatalogViewModel: fetch + derived views for one catalog

==============================================================================
"""

from .models import (
    ALL_CATEGORIES,
    Catalog,
    CatalogItem,
    Product,
    ProductImage,
    SortOrder,
    ViewMode,
)
from .view_model import CatalogViewModel

__all__ = [
    "ALL_CATEGORIES",
    "Catalog",
    "CatalogItem",
    "Product",
    "ProductImage",
    "SortOrder",
    "ViewMode",
    "CatalogViewModel",
]
