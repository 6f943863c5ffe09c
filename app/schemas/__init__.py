"""
Pydantic request/response schemas for the HTTP API.
"""

from .common import MessageResponse, PaginatedResponse
from .auth import LoginRequest, SessionResponse, SessionStatusResponse, UserInfo
from .catalog import (
    CatalogCreate,
    CatalogDetail,
    CatalogDetailResponse,
    CatalogUpdate,
    CatalogViewResponse,
    ProductCard,
)
from .product import (
    ImportResult,
    ProductCreate,
    ProductDetail,
    ProductDetailResponse,
    ProductUpdate,
)
from .site import (
    ShortlistResponse,
    ShortlistToggleResponse,
    SiteConfigResponse,
    SiteConfigUpdate,
    PageContext,
    ToastResponse,
)

__all__ = [
    "MessageResponse",
    "PaginatedResponse",
    "LoginRequest",
    "SessionResponse",
    "SessionStatusResponse",
    "UserInfo",
    "CatalogCreate",
    "CatalogDetail",
    "CatalogDetailResponse",
    "CatalogUpdate",
    "CatalogViewResponse",
    "ProductCard",
    "ImportResult",
    "ProductCreate",
    "ProductDetail",
    "ProductDetailResponse",
    "ProductUpdate",
    "ShortlistResponse",
    "ShortlistToggleResponse",
    "SiteConfigResponse",
    "SiteConfigUpdate",
    "PageContext",
    "ToastResponse",
]
