"""
==============================================================================
Catalog Schemas Module
==============================================================================

Schemas for the public catalog view and the catalog admin endpoints.

==============================================================================
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# PUBLIC CATALOG VIEW
# =============================================================================

class ImageOut(BaseModel):
    """Product image."""
    id: Optional[Union[int, str]] = None
    url: str
    position: int = 0


class ProductCard(BaseModel):
    """Product as listed in a catalog page."""
    id: str
    name: str
    code: Optional[str] = None
    category: Optional[str] = None
    price: float = 0
    description: Optional[str] = None
    images: List[ImageOut] = Field(default_factory=list)


class CatalogViewResponse(BaseModel):
    """One page of a catalog after filtering and sorting."""
    success: bool = Field(default=True)
    slug: str
    name: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_expired: bool = False
    categories: List[str]
    search_term: str
    active_category: str
    sort_order: str
    view_mode: str
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)
    products: List[ProductCard]


# =============================================================================
# CATALOG ADMINISTRATION
# =============================================================================

class CatalogCreate(BaseModel):
    """Catalog creation request."""
    slug: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=200)
    expires_at: Optional[datetime] = None
    product_ids: List[str] = Field(default_factory=list)


class CatalogUpdate(BaseModel):
    """Catalog update request; ``product_ids`` replaces the item list."""
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=200)
    expires_at: Optional[datetime] = None
    product_ids: Optional[List[str]] = None

    @field_validator("product_ids")
    @classmethod
    def drop_duplicates(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return list(dict.fromkeys(v))


class CatalogItemInfo(BaseModel):
    """Catalog item with the id of the product it points to."""
    id: int
    position: int
    product_id: Optional[str] = None

    class Config:
        from_attributes = True


class CatalogDetail(BaseModel):
    """Full catalog record."""
    id: str
    slug: str
    name: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime
    items: List[CatalogItemInfo] = Field(default_factory=list)

    class Config:
        from_attributes = True


class CatalogDetailResponse(BaseModel):
    """Single catalog response."""
    success: bool = Field(default=True)
    catalog: CatalogDetail
