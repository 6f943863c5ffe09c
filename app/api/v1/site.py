"""
==============================================================================
Site Endpoints
==============================================================================

Cached site configuration and the toast slot.

==============================================================================
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_site_config, get_toast
from app.schemas.site import SiteConfigResponse, ToastResponse
from app.state.site_config import SiteConfigLoader
from app.state.toast import ToastNotifier


router = APIRouter(tags=["Site"])


@router.get("/config", response_model=SiteConfigResponse)
async def get_site_configuration(loader: SiteConfigLoader = Depends(get_site_config)):
    """Site configuration, fetched on first use and cached afterwards."""
    await loader.fetch_config()
    return SiteConfigResponse(
        success=loader.error is None,
        config=loader.config,
        error=loader.error
    )


@router.get("/toast", response_model=ToastResponse)
async def get_toast_state(toast: ToastNotifier = Depends(get_toast)):
    return ToastResponse(**toast.toast.to_dict())


@router.delete("/toast", response_model=ToastResponse)
async def hide_toast(toast: ToastNotifier = Depends(get_toast)):
    """Dismiss the toast now."""
    toast.hide()
    return ToastResponse(**toast.toast.to_dict())
