"""
==============================================================================
Product Schemas Module
==============================================================================

Request and response schemas for the product admin endpoints.

Import Payload Format:
---------------------
    [
        {"nombre": "Mesa", "codigo": "M-01", "categoria": "Muebles",
         "precio": 120.5, "imagenes": ["https://.../mesa.jpg"]},
        ...
    ]

Spanish keys are accepted everywhere so exported rows can be imported back.

==============================================================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductBase(BaseModel):
    """Fields shared by create and import."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200, alias="nombre")
    code: Optional[str] = Field(None, max_length=100, alias="codigo")
    category: Optional[str] = Field(None, max_length=100, alias="categoria")
    price: float = Field(0, ge=0, alias="precio")
    description: Optional[str] = Field(None, alias="descripcion")
    images: List[str] = Field(default_factory=list, alias="imagenes")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("code", "category")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class ProductCreate(ProductBase):
    """Product creation request."""


class ProductUpdate(BaseModel):
    """Partial product update; ``images`` replaces the image list."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200, alias="nombre")
    code: Optional[str] = Field(None, max_length=100, alias="codigo")
    category: Optional[str] = Field(None, max_length=100, alias="categoria")
    price: Optional[float] = Field(None, ge=0, alias="precio")
    description: Optional[str] = Field(None, alias="descripcion")
    images: Optional[List[str]] = Field(None, alias="imagenes")


class ProductImageInfo(BaseModel):
    id: int
    url: str
    position: int

    class Config:
        from_attributes = True


class ProductDetail(BaseModel):
    """Full product record."""
    id: str
    name: str
    code: Optional[str] = None
    category: Optional[str] = None
    price: float
    description: Optional[str] = None
    created_at: datetime
    images: List[ProductImageInfo] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ProductDetailResponse(BaseModel):
    """Single product response."""
    success: bool = Field(default=True)
    product: ProductDetail


class ImportResult(BaseModel):
    """Outcome of a product import."""
    success: bool = Field(default=True)
    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    total: int = Field(ge=0)
