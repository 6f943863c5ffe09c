"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the storefront state and the admin session.

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │  get_context()  │ ← app.state.context
                    └────────┬────────┘
        ┌──────────┬─────────┼──────────┬──────────────────┐
        │          │         │          │                  │
   get_store  get_shortlist get_toast get_site_config  get_session_optional
                                                            │
                                                    ┌───────▼───────┐
                                                    │require_session│
                                                    └───────────────┘

The session token is read from the ``Authorization: Bearer`` header first,
then from the session cookie.

Usage Examples:
--------------
    # Require a signed-in administrator
    @router.post("/admin/productos")
    async def create_product(session: SessionInfo = Depends(require_session)):
        ...

    # Touch the quote selection
    @router.post("/cotizacion/{product_id}")
    async def add(product_id: str, shortlist: ShortlistStore = Depends(get_shortlist)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import get_settings
from app.core import exceptions
from app.core.context import StorefrontContext
from app.db.database import get_db
from app.state.shortlist import ShortlistStore
from app.state.site_config import SiteConfigLoader
from app.state.toast import ToastNotifier
from app.store.remote import RemoteStore, SessionInfo


# Module logger
logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for Swagger UI
security_scheme = HTTPBearer(auto_error=False)

__all__ = [
    "get_db",
    "get_context",
    "get_store",
    "get_shortlist",
    "get_toast",
    "get_site_config",
    "extract_session_token",
    "get_session_optional",
    "require_session",
    "get_pagination",
]


# =============================================================================
# CONTEXT DEPENDENCIES
# =============================================================================

def get_context(request: Request) -> StorefrontContext:
    """Process-wide context attached to the application."""
    return request.app.state.context


def get_store(context: StorefrontContext = Depends(get_context)) -> RemoteStore:
    return context.store


def get_shortlist(context: StorefrontContext = Depends(get_context)) -> ShortlistStore:
    return context.shortlist


def get_toast(context: StorefrontContext = Depends(get_context)) -> ToastNotifier:
    return context.toast


def get_site_config(context: StorefrontContext = Depends(get_context)) -> SiteConfigLoader:
    return context.site_config


# =============================================================================
# SESSION DEPENDENCIES
# =============================================================================

def extract_session_token(request: Request) -> Optional[str]:
    """
    Read the session token from a request.

    Args:
        request: Incoming request

    Returns:
        Bearer token, else the session cookie, else None
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return request.cookies.get(get_settings().session_cookie_name) or None


async def get_session_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    store: RemoteStore = Depends(get_store)
) -> Optional[SessionInfo]:
    """
    FastAPI dependency returning the current session, or None.

    Args:
        request: Incoming request (cookie fallback)
        credentials: HTTP Bearer credentials (injected, optional)
        store: Remote store (injected)

    Returns:
        SessionInfo when signed in, None otherwise
    """
    token = credentials.credentials if credentials else extract_session_token(request)
    return await store.get_session(token)


async def require_session(
    session: Optional[SessionInfo] = Depends(get_session_optional)
) -> SessionInfo:
    """
    FastAPI dependency requiring a signed-in administrator.

    Raises:
        AppException: SESSION_REQUIRED when there is no session
    """
    if session is None:
        logger.debug("Admin endpoint called without a session")
        raise exceptions.session_required()
    return session


# =============================================================================
# PAGINATION DEPENDENCY
# =============================================================================

def get_pagination(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page")
) -> Dict[str, int]:
    """
    FastAPI dependency for admin list pagination.

    Returns:
        Dictionary with page, page_size, and offset
    """
    return {
        "page": page,
        "page_size": page_size,
        "offset": (page - 1) * page_size
    }
