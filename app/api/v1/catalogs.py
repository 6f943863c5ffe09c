"""
==============================================================================
Public Catalog Endpoints
==============================================================================

Filtered, sorted and paginated view of a shared catalog.

Query Parameters:
----------------
    q          search term (name or code, case-insensitive)
    categoria  category, "Todos" for all
    orden      nombre-asc | precio-asc | precio-desc
    pagina     requested page, clamped into range
    vista      grid | list

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.catalog.models import ALL_CATEGORIES, SortOrder, ViewMode
from app.catalog.view_model import CatalogViewModel
from app.core.dependencies import get_store
from app.schemas.catalog import CatalogViewResponse
from app.store.remote import RemoteStore


router = APIRouter(prefix="/catalogos", tags=["Catalogs"])


class CatalogController:
    """Controller for the public catalog view."""

    def __init__(self, store: RemoteStore):
        self._store = store

    async def view(
        self,
        slug: str,
        search: Optional[str],
        category: Optional[str],
        order: SortOrder,
        page: int,
        mode: ViewMode
    ) -> CatalogViewResponse:
        view_model = await CatalogViewModel.mount(self._store, slug)

        failure = view_model.failure
        if failure is not None:
            failure.details.setdefault("slug", slug)
            raise failure

        view_model.search_term = search
        view_model.active_category = category
        view_model.sort_order = order
        view_model.view_mode = mode
        view_model.go_to_page(page)

        return CatalogViewResponse(**view_model.snapshot())


@router.get("/{slug}", response_model=CatalogViewResponse)
async def get_catalog_view(
    slug: str,
    q: Optional[str] = Query(None, max_length=100, description="Search term"),
    categoria: Optional[str] = Query(ALL_CATEGORIES, description="Category filter"),
    orden: SortOrder = Query(SortOrder.NAME_ASC, description="Sort order"),
    pagina: int = Query(1, ge=1, description="Page number"),
    vista: ViewMode = Query(ViewMode.GRID, description="Presentation"),
    store: RemoteStore = Depends(get_store)
):
    """One page of the catalog at ``/c/<slug>``."""
    controller = CatalogController(store)
    return await controller.view(slug, q, categoria, orden, pagina, vista)
