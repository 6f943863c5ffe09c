"""
==============================================================================
Site Configuration Administration Endpoints
==============================================================================

Read and replace the site configuration blob. Saving drops the cached copy
so the next public page load picks up the new values.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_site_config, get_toast, require_session
from app.schemas.site import SiteConfigResponse, SiteConfigUpdate
from app.services.config_service import SiteConfigService
from app.state.site_config import SiteConfigLoader
from app.state.toast import ToastNotifier


router = APIRouter(
    prefix="/admin/configuracion",
    tags=["Admin: Configuration"],
    dependencies=[Depends(require_session)]
)


@router.get("", response_model=SiteConfigResponse)
async def get_configuration(db: Session = Depends(get_db)):
    """Stored configuration blob."""
    return SiteConfigResponse(config=SiteConfigService(db).get_config())


@router.put("", response_model=SiteConfigResponse)
async def update_configuration(
    data: SiteConfigUpdate,
    db: Session = Depends(get_db),
    loader: SiteConfigLoader = Depends(get_site_config),
    toast: ToastNotifier = Depends(get_toast)
):
    """Replace the configuration blob."""
    config = SiteConfigService(db).update_config(data.config)
    loader.reset()
    toast.show("Configuración guardada")
    return SiteConfigResponse(config=config)
