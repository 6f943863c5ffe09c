"""
==============================================================================
Site Schemas Module
==============================================================================

Schemas for the quote shortlist, the site configuration and the toast.

==============================================================================
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ShortlistResponse(BaseModel):
    """Current quote selection."""
    success: bool = Field(default=True)
    count: int = Field(ge=0)
    product_ids: List[str]


class ShortlistToggleResponse(ShortlistResponse):
    """Selection after a toggle, plus the toggled product's state."""
    product_id: str
    selected: bool


class SiteConfigResponse(BaseModel):
    """Cached site configuration."""
    success: bool = Field(default=True)
    config: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class SiteConfigUpdate(BaseModel):
    """Replacement configuration blob."""
    config: Dict[str, Any]


class ToastResponse(BaseModel):
    """Current toast slot."""
    message: str
    kind: str
    visible: bool
    duration_ms: int


class PageContext(BaseModel):
    """What a page route resolved to."""
    success: bool = Field(default=True)
    route: str
    path: str
    layout: str
    params: Dict[str, str] = Field(default_factory=dict)
    authenticated: bool = False
    config: Optional[Dict[str, Any]] = None
