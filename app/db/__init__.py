"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure and ORM models of the hosted catalog database.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
├── models.py     - Catalog, CatalogItem, Product, ProductImage,
│                   SiteConfiguration, User
└── init_db.py    - DatabaseInitializer for startup

==============================================================================
"""

from .database import Base, DatabaseManager, get_db
from .models import (
    Catalog,
    CatalogItem,
    Product,
    ProductImage,
    SiteConfiguration,
    User,
)
from .init_db import DatabaseInitializer, init_db

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db",
    "Catalog",
    "CatalogItem",
    "Product",
    "ProductImage",
    "SiteConfiguration",
    "User",
    "DatabaseInitializer",
    "init_db",
]
