"""
==============================================================================
Catalog Snapshot Models
==============================================================================

Pydantic models for the read-only catalog snapshot the view model holds.

Field names are English; aliases match the keys of the remote response
(``nombre``, ``catalogo_items``, ``productos``, ...). Validation failures
mean the remote response was malformed.

==============================================================================
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


ALL_CATEGORIES = "Todos"


class SortOrder(str, enum.Enum):
    """Sort orders offered by the catalog view."""

    NAME_ASC = "nombre-asc"
    PRICE_ASC = "precio-asc"
    PRICE_DESC = "precio-desc"

    def __str__(self) -> str:
        return self.value


class ViewMode(str, enum.Enum):
    """Presentation of the product list."""

    GRID = "grid"
    LIST = "list"

    def __str__(self) -> str:
        return self.value


class ProductImage(BaseModel):
    """Image attached to a product."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[Union[int, str]] = None
    url: str
    position: int = Field(default=0, alias="orden")


class Product(BaseModel):
    """
    Product as shown in a catalog.

    Attributes:
        id: Product identifier
        name: Display name (``nombre``)
        code: Optional code (``codigo``)
        category: Optional category (``categoria``), blank means none
        price: Unit price (``precio``)
        images: Product images (``producto_imagenes``)
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str = Field(..., alias="nombre")
    code: Optional[str] = Field(default=None, alias="codigo")
    category: Optional[str] = Field(default=None, alias="categoria")
    price: float = Field(default=0, alias="precio")
    description: Optional[str] = Field(default=None, alias="descripcion")
    images: List[ProductImage] = Field(default_factory=list, alias="producto_imagenes")

    @property
    def has_category(self) -> bool:
        return bool(self.category and self.category.strip())


class CatalogItem(BaseModel):
    """Link to a product; ``product`` is None when it did not resolve."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[Union[int, str]] = None
    position: int = Field(default=0, alias="orden")
    product: Optional[Product] = Field(default=None, alias="productos")


class Catalog(BaseModel):
    """Catalog snapshot with its ordered items."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    slug: str
    name: Optional[str] = Field(default=None, alias="nombre")
    expires_at: Optional[datetime] = Field(default=None, alias="fecha_caducidad")
    items: List[CatalogItem] = Field(default_factory=list, alias="catalogo_items")
