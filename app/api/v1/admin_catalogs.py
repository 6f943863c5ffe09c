"""
==============================================================================
Catalog Administration Endpoints
==============================================================================

Catalog CRUD. Every endpoint requires a session; every mutation
announces itself through the toast.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_pagination, get_toast, require_session
from app.schemas.catalog import (
    CatalogCreate,
    CatalogDetail,
    CatalogDetailResponse,
    CatalogUpdate,
)
from app.schemas.common import MessageResponse, PaginatedResponse
from app.services.catalog_service import CatalogService
from app.state.toast import ToastNotifier


router = APIRouter(
    prefix="/admin/catalogos",
    tags=["Admin: Catalogs"],
    dependencies=[Depends(require_session)]
)


class CatalogAdminController:
    """Controller for catalog administration."""

    def __init__(self, db: Session, toast: ToastNotifier):
        self._service = CatalogService(db)
        self._toast = toast

    def list_catalogs(self, pagination: dict) -> PaginatedResponse[CatalogDetail]:
        catalogs, total = self._service.list_catalogs(
            offset=pagination["offset"],
            limit=pagination["page_size"]
        )
        return PaginatedResponse[CatalogDetail].create(
            items=[CatalogDetail.model_validate(c) for c in catalogs],
            total=total,
            page=pagination["page"],
            page_size=pagination["page_size"]
        )

    def get_catalog(self, catalog_id: str) -> CatalogDetailResponse:
        catalog = self._service.get_by_id(catalog_id)
        return CatalogDetailResponse(catalog=CatalogDetail.model_validate(catalog))

    def create_catalog(self, data: CatalogCreate) -> CatalogDetailResponse:
        catalog = self._service.create_catalog(data)
        self._toast.show(f"Catálogo '{catalog.slug}' creado")
        return CatalogDetailResponse(catalog=CatalogDetail.model_validate(catalog))

    def update_catalog(self, catalog_id: str, data: CatalogUpdate) -> CatalogDetailResponse:
        catalog = self._service.update_catalog(catalog_id, data)
        self._toast.show(f"Catálogo '{catalog.slug}' actualizado")
        return CatalogDetailResponse(catalog=CatalogDetail.model_validate(catalog))

    def delete_catalog(self, catalog_id: str) -> MessageResponse:
        self._service.delete_catalog(catalog_id)
        self._toast.show("Catálogo eliminado")
        return MessageResponse(message="Catálogo eliminado")


@router.get("", response_model=PaginatedResponse[CatalogDetail])
async def list_catalogs(
    pagination: dict = Depends(get_pagination),
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """List catalogs, newest first."""
    controller = CatalogAdminController(db, toast)
    return controller.list_catalogs(pagination)


@router.post("", response_model=CatalogDetailResponse, status_code=201)
async def create_catalog(
    data: CatalogCreate,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Create a catalog; the slug is normalized and must be unique."""
    controller = CatalogAdminController(db, toast)
    return controller.create_catalog(data)


@router.get("/{catalog_id}", response_model=CatalogDetailResponse)
async def get_catalog(
    catalog_id: str,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    controller = CatalogAdminController(db, toast)
    return controller.get_catalog(catalog_id)


@router.put("/{catalog_id}", response_model=CatalogDetailResponse)
async def update_catalog(
    catalog_id: str,
    data: CatalogUpdate,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Update a catalog; ``product_ids`` replaces its items."""
    controller = CatalogAdminController(db, toast)
    return controller.update_catalog(catalog_id, data)


@router.delete("/{catalog_id}", response_model=MessageResponse)
async def delete_catalog(
    catalog_id: str,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    controller = CatalogAdminController(db, toast)
    return controller.delete_catalog(catalog_id)
