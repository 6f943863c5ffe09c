"""
==============================================================================
Navigation Middleware
==============================================================================

Runs the NavigationGuard in front of every page request.

Page requests are GET requests outside the API, the docs and the static
mount. A redirected navigation answers 302 to its target; an allowed one
is stored on ``request.state.navigation`` for the page endpoint.

==============================================================================
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.dependencies import extract_session_token
from app.router.guard import GuardState


# Module logger
logger = logging.getLogger(__name__)

EXCLUDED_PREFIXES = ("/api", "/docs", "/redoc", "/openapi.json", "/static")


def is_page_request(request: Request) -> bool:
    if request.method != "GET":
        return False
    return not request.url.path.startswith(EXCLUDED_PREFIXES)


class NavigationMiddleware(BaseHTTPMiddleware):
    """Guard page navigations with the process-wide NavigationGuard."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not is_page_request(request):
            return await call_next(request)

        guard = request.app.state.context.guard
        navigation = await guard.navigate(request.url.path, extract_session_token(request))

        if navigation.state is GuardState.REDIRECTED:
            return RedirectResponse(url=navigation.redirect_to, status_code=302)

        if navigation.path != navigation.requested_path:
            logger.debug(f"Route redirect {navigation.requested_path} → {navigation.path}")
            return RedirectResponse(url=navigation.path, status_code=302)

        request.state.navigation = navigation
        return await call_next(request)
