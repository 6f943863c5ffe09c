"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the hosted catalog database.

Python attributes are English; the underlying tables keep the Spanish
column names the storefront reads (``nombre``, ``precio``, ...).

Database Schema:
---------------

    ┌──────────────────────────┐        ┌──────────────────────────┐
    │        catalogos         │        │        productos         │
    ├──────────────────────────┤        ├──────────────────────────┤
    │ id (UUID, PK)            │        │ id (UUID, PK)            │
    │ slug (UNIQUE)            │        │ nombre (NOT NULL)        │
    │ nombre                   │        │ codigo (NULLABLE)        │
    │ fecha_caducidad (NULL)   │        │ categoria (NULLABLE)     │
    │ created_at               │        │ precio (NUMERIC)         │
    └────────────┬─────────────┘        │ descripcion (NULLABLE)   │
                 │ 1:N                  └────────────┬─────────────┘
    ┌────────────▼─────────────┐                     │ 1:N
    │      catalogo_items      │                     │
    ├──────────────────────────┤        ┌────────────▼─────────────┐
    │ id (INTEGER, PK)         │        │    producto_imagenes     │
    │ catalogo_id (FK CASCADE) │        ├──────────────────────────┤
    │ producto_id (FK SET NULL)│        │ id (INTEGER, PK)         │
    │ orden                    │        │ producto_id (FK CASCADE) │
    └──────────────────────────┘        │ url, orden               │
                                        └──────────────────────────┘

    ┌──────────────────────────┐        ┌──────────────────────────┐
    │   sitio_configuracion    │        │          users           │
    ├──────────────────────────┤        ├──────────────────────────┤
    │ id (BOOLEAN, PK = true)  │        │ id (UUID, PK)            │
    │ config_json (JSON)       │        │ username, password_hash  │
    └──────────────────────────┘        │ is_active, timestamps    │
                                        └──────────────────────────┘

=============================================================================
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, relationship

from app.db.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


# =============================================================================
# USER MODEL
# =============================================================================

class User(Base):
    """
    Administrator account.

    The storefront only cares whether a session exists, so there are
    no roles: any active user may open an admin session.
    """

    __tablename__ = "users"

    id: str = Column(String(36), primary_key=True, default=_uuid)

    username: str = Column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique login name (lowercase)"
    )

    password_hash: str = Column(String(255), nullable=False, doc="Bcrypt hashed password")

    is_active: bool = Column(Boolean, default=True, nullable=False)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    updated_at: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, is_active={self.is_active})"


# =============================================================================
# PRODUCT MODELS
# =============================================================================

class Product(Base):
    """
    Product offered in one or more catalogs.

    Attributes:
        id: Unique identifier (UUID)
        name: Display name (``nombre``)
        code: Optional internal/supplier code (``codigo``)
        category: Optional category label (``categoria``)
        price: Unit price (``precio``)
        description: Optional long text (``descripcion``)
        images: Ordered product images
    """

    __tablename__ = "productos"

    id: str = Column(String(36), primary_key=True, default=_uuid)

    name: str = Column("nombre", String(200), nullable=False)

    code: Optional[str] = Column("codigo", String(100), nullable=True, index=True)

    category: Optional[str] = Column("categoria", String(100), nullable=True, index=True)

    price: float = Column("precio", Numeric(12, 2, asdecimal=False), nullable=False, default=0)

    description: Optional[str] = Column("descripcion", Text, nullable=True)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    images: Mapped[List["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.position",
    )

    def to_remote(self) -> Dict[str, Any]:
        """Row as the storefront receives it, images nested."""
        return {
            "id": self.id,
            "nombre": self.name,
            "codigo": self.code,
            "categoria": self.category,
            "precio": self.price,
            "descripcion": self.description,
            "producto_imagenes": [image.to_remote() for image in self.images],
        }

    def __repr__(self) -> str:
        return f"Product(id={self.id!r}, name={self.name!r}, price={self.price!r})"


class ProductImage(Base):
    """Image attached to a product, ordered by ``orden``."""

    __tablename__ = "producto_imagenes"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: str = Column(
        "producto_id",
        String(36),
        ForeignKey("productos.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    url: str = Column(String(500), nullable=False)

    position: int = Column("orden", Integer, nullable=False, default=0)

    product: Mapped["Product"] = relationship("Product", back_populates="images")

    def to_remote(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "producto_id": self.product_id,
            "url": self.url,
            "orden": self.position,
        }


# =============================================================================
# CATALOG MODELS
# =============================================================================

class Catalog(Base):
    """
    Shareable collection of products reachable at ``/c/<slug>``.

    Attributes:
        id: Unique identifier (UUID)
        slug: Human-readable unique key used in URLs
        name: Display name
        expires_at: Optional expiration timestamp (``fecha_caducidad``)
        items: Ordered catalog items
    """

    __tablename__ = "catalogos"

    id: str = Column(String(36), primary_key=True, default=_uuid)

    slug: str = Column(String(100), unique=True, nullable=False, index=True)

    name: Optional[str] = Column("nombre", String(200), nullable=True)

    expires_at: Optional[datetime] = Column("fecha_caducidad", DateTime(timezone=True), nullable=True)

    created_at: datetime = Column(DateTime, default=func.now(), nullable=False)

    items: Mapped[List["CatalogItem"]] = relationship(
        "CatalogItem",
        back_populates="catalog",
        cascade="all, delete-orphan",
        order_by="CatalogItem.position",
    )

    def to_remote(self) -> Dict[str, Any]:
        """Catalog with nested items → products → images."""
        return {
            "id": self.id,
            "slug": self.slug,
            "nombre": self.name,
            "fecha_caducidad": self.expires_at.isoformat() if self.expires_at else None,
            "catalogo_items": [item.to_remote() for item in self.items],
        }

    def __repr__(self) -> str:
        return f"Catalog(id={self.id!r}, slug={self.slug!r})"


class CatalogItem(Base):
    """
    Link between a catalog and a product.

    ``product_id`` becomes NULL when the product is deleted; such items
    are kept but never shown.
    """

    __tablename__ = "catalogo_items"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    catalog_id: str = Column(
        "catalogo_id",
        String(36),
        ForeignKey("catalogos.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    product_id: Optional[str] = Column(
        "producto_id",
        String(36),
        ForeignKey("productos.id", ondelete="SET NULL"),
        nullable=True
    )

    position: int = Column("orden", Integer, nullable=False, default=0)

    catalog: Mapped["Catalog"] = relationship("Catalog", back_populates="items")

    product: Mapped[Optional["Product"]] = relationship("Product")

    def to_remote(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "orden": self.position,
            "productos": self.product.to_remote() if self.product else None,
        }


# =============================================================================
# SITE CONFIGURATION
# =============================================================================

class SiteConfiguration(Base):
    """Singleton row (``id = true``) holding the site configuration blob."""

    __tablename__ = "sitio_configuracion"

    id: bool = Column(Boolean, primary_key=True, default=True)

    config_json: Dict[str, Any] = Column(JSON, nullable=False, default=dict)

    updated_at: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
