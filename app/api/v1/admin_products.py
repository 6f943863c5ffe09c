"""
==============================================================================
Product Administration Endpoints
==============================================================================

Product CRUD and bulk import. Every endpoint requires a session; every
mutation announces itself through the toast.

==============================================================================
"""

from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from app.core.dependencies import get_db, get_pagination, get_toast, require_session
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.product import (
    ImportResult,
    ProductCreate,
    ProductDetail,
    ProductDetailResponse,
    ProductUpdate,
)
from app.services.product_service import ProductService
from app.state.toast import ToastNotifier


router = APIRouter(
    prefix="/admin/productos",
    tags=["Admin: Products"],
    dependencies=[Depends(require_session)]
)


class ProductController:
    """Controller for product administration."""

    def __init__(self, db: Session, toast: ToastNotifier):
        self._service = ProductService(db)
        self._toast = toast

    def list_products(
        self,
        search: Optional[str],
        category: Optional[str],
        pagination: Dict[str, int]
    ) -> PaginatedResponse[ProductDetail]:
        products, total = self._service.list_products(
            search=search,
            category=category,
            offset=pagination["offset"],
            limit=pagination["page_size"]
        )
        return PaginatedResponse[ProductDetail].create(
            items=[ProductDetail.model_validate(p) for p in products],
            total=total,
            page=pagination["page"],
            page_size=pagination["page_size"]
        )

    def get_product(self, product_id: str) -> ProductDetailResponse:
        product = self._service.get_by_id(product_id)
        return ProductDetailResponse(product=ProductDetail.model_validate(product))

    def create_product(self, data: ProductCreate) -> ProductDetailResponse:
        product = self._service.create_product(data)
        self._toast.show("Producto creado correctamente")
        return ProductDetailResponse(product=ProductDetail.model_validate(product))

    def update_product(self, product_id: str, data: ProductUpdate) -> ProductDetailResponse:
        product = self._service.update_product(product_id, data)
        self._toast.show("Producto actualizado correctamente")
        return ProductDetailResponse(product=ProductDetail.model_validate(product))

    def delete_product(self, product_id: str) -> MessageResponse:
        self._service.delete_product(product_id)
        self._toast.show("Producto eliminado")
        return MessageResponse(message="Producto eliminado")

    def import_products(self, payload) -> ImportResult:
        created, updated = self._service.import_products(payload)
        self._toast.show(f"{created + updated} productos importados")
        return ImportResult(created=created, updated=updated, total=created + updated)


@router.get("", response_model=PaginatedResponse[ProductDetail])
async def list_products(
    q: Optional[str] = Query(None, description="Search by name or code"),
    categoria: Optional[str] = Query(None, description="Category filter"),
    pagination: dict = Depends(get_pagination),
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """List products with pagination."""
    controller = ProductController(db, toast)
    return controller.list_products(q, categoria, pagination)


@router.post("", response_model=ProductDetailResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Create a product."""
    controller = ProductController(db, toast)
    return controller.create_product(data)


@router.post("/importar", response_model=ImportResult)
async def import_products(
    payload: Union[List[Dict[str, Any]], Dict[str, List[Dict[str, Any]]]] = Body(...),
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Create or update products from a JSON list or a category-grouped mapping."""
    controller = ProductController(db, toast)
    return controller.import_products(payload)


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    controller = ProductController(db, toast)
    return controller.get_product(product_id)


@router.put("/{product_id}", response_model=ProductDetailResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Update a product; a provided image list replaces the current one."""
    controller = ProductController(db, toast)
    return controller.update_product(product_id, data)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    toast: ToastNotifier = Depends(get_toast)
):
    """Delete a product; catalog entries pointing at it stop resolving."""
    controller = ProductController(db, toast)
    return controller.delete_product(product_id)
