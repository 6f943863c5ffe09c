"""
==============================================================================
Page Route Endpoint
==============================================================================

Catch-all GET endpoint answering every page of the route table with its
page context. Must be registered after every other route.

NavigationMiddleware has normally run the guard already and left the
settled navigation on ``request.state``; when it has not, the guard runs
here.

==============================================================================
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.core import exceptions
from app.core.context import StorefrontContext
from app.core.dependencies import extract_session_token, get_context
from app.router.guard import GuardState
from app.router.routes import Layout
from app.schemas.site import PageContext


router = APIRouter(tags=["Pages"])


@router.get("/{full_path:path}", response_model=PageContext)
async def render_page(
    full_path: str,
    request: Request,
    context: StorefrontContext = Depends(get_context)
):
    """Page context of the resolved route."""
    navigation = getattr(request.state, "navigation", None)

    if navigation is None:
        navigation = await context.guard.navigate(f"/{full_path}", extract_session_token(request))
        if navigation.state is GuardState.REDIRECTED:
            return RedirectResponse(url=navigation.redirect_to, status_code=302)

    route = navigation.route
    if route is None:
        raise exceptions.route_not_found(navigation.path)

    config = None
    if route.layout is Layout.PUBLIC:
        config = context.site_config.config

    return PageContext(
        route=route.name,
        path=navigation.path,
        layout=route.layout.value,
        params=route.params,
        authenticated=navigation.session is not None,
        config=config
    )
