"""
==============================================================================
Product Service Module
==============================================================================

Product administration: CRUD plus bulk import.

Import Payloads:
---------------
Two shapes are accepted:

    # Flat list
    [{"nombre": "Mesa", "categoria": "Muebles", "precio": 120}, ...]

    # Grouped by category (the category key fills ``categoria``)
    {"Muebles": [{"nombre": "Mesa", "precio": 120}, ...], ...}

Rows with a ``codigo`` matching an existing product update it; every other
row creates a new product.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.core import exceptions
from app.db.models import CatalogItem, Product, ProductImage
from app.schemas.product import ProductCreate, ProductUpdate


# Module logger
logger = logging.getLogger(__name__)

ImportPayload = Union[List[Dict[str, Any]], Dict[str, List[Dict[str, Any]]]]


class ProductService:
    """
    Product management service for admin operations.

    Example:
        >>> service = ProductService(db_session)
        >>> product = service.create_product(ProductCreate(nombre="Mesa", precio=120))
        >>> products, total = service.list_products(search="mesa")
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    def create_product(self, data: ProductCreate, commit: bool = True) -> Product:
        """
        Create a product with its images.

        Args:
            data: Validated product fields
            commit: Commit immediately (False inside an import batch)

        Returns:
            Created Product model
        """
        product = Product(
            name=data.name,
            code=data.code,
            category=data.category,
            price=data.price,
            description=data.description,
        )
        self._set_images(product, data.images)
        self._db.add(product)

        if commit:
            self._db.commit()
            self._db.refresh(product)
            logger.info(f"✅ Product created: {product.name} ({product.id})")

        return product

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def get_by_id(self, product_id: str) -> Product:
        """
        Get product by ID.

        Raises:
            AppException: PRODUCT_NOT_FOUND if product doesn't exist
        """
        product = (
            self._db.query(Product)
            .options(selectinload(Product.images))
            .filter(Product.id == product_id)
            .first()
        )

        if not product:
            logger.warning(f"Product not found: {product_id}")
            raise exceptions.product_not_found(product_id)

        return product

    def list_products(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        offset: int = 0,
        limit: int = 20
    ) -> Tuple[List[Product], int]:
        """
        List products by name, filtered by a search term and category.

        Returns:
            Tuple of (products in page, total matching)
        """
        query = self._db.query(Product)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.code.ilike(pattern)))

        if category:
            query = query.filter(Product.category == category)

        total = query.count()
        products = (
            query.options(selectinload(Product.images))
            .order_by(Product.name.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return products, total

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        """
        Apply a partial update; a provided image list replaces the current one.

        Raises:
            AppException: PRODUCT_NOT_FOUND if product doesn't exist
        """
        product = self.get_by_id(product_id)
        changes = data.model_dump(exclude_unset=True)

        images = changes.pop("images", None)
        for field, value in changes.items():
            if field == "name" and value is not None:
                value = value.strip()
            setattr(product, field, value)

        if images is not None:
            self._set_images(product, images)

        self._db.commit()
        self._db.refresh(product)

        logger.info(f"✅ Product updated: {product.name} ({product.id})")
        return product

    # =========================================================================
    # DELETE OPERATIONS
    # =========================================================================

    def delete_product(self, product_id: str) -> None:
        """
        Delete a product. Catalog items pointing at it are kept unresolved.

        Raises:
            AppException: PRODUCT_NOT_FOUND if product doesn't exist
        """
        product = self.get_by_id(product_id)

        self._db.query(CatalogItem).filter(
            CatalogItem.product_id == product_id
        ).update({CatalogItem.product_id: None}, synchronize_session=False)

        self._db.delete(product)
        self._db.commit()

        logger.info(f"🗑️ Product deleted: {product_id}")

    # =========================================================================
    # IMPORT
    # =========================================================================

    @staticmethod
    def parse_import(payload: ImportPayload) -> List[ProductCreate]:
        """
        Validate an import payload into product rows.

        Raises:
            AppException: VALIDATION_ERROR naming the first offending row
        """
        rows: List[Dict[str, Any]] = []

        if isinstance(payload, dict):
            for category, products_list in payload.items():
                if not isinstance(products_list, list):
                    raise exceptions.validation_error(
                        f"El grupo '{category}' debe ser una lista de productos",
                        {"category": category}
                    )
                for item in products_list:
                    if not isinstance(item, dict):
                        raise exceptions.validation_error(
                            f"Fila {len(rows) + 1} inválida",
                            {"row": len(rows), "category": category}
                        )
                    rows.append({"categoria": category, **item})
        else:
            rows = list(payload)

        parsed = []
        for index, row in enumerate(rows):
            try:
                parsed.append(ProductCreate.model_validate(row))
            except ValidationError as e:
                raise exceptions.validation_error(
                    f"Fila {index + 1} inválida",
                    {"row": index, "errors": e.errors(include_url=False, include_context=False)}
                ) from e

        return parsed

    def import_products(self, payload: ImportPayload) -> Tuple[int, int]:
        """
        Create or update products from an import payload in one transaction.

        Returns:
            Tuple of (created, updated)
        """
        rows = self.parse_import(payload)

        codes = {row.code for row in rows if row.code}
        existing: Dict[str, Product] = {}
        if codes:
            for product in self._db.query(Product).filter(Product.code.in_(codes)).all():
                existing[product.code] = product

        created = updated = 0
        for row in rows:
            product = existing.get(row.code) if row.code else None
            if product is None:
                product = self.create_product(row, commit=False)
                if row.code:
                    existing[row.code] = product
                created += 1
            else:
                product.name = row.name
                product.category = row.category
                product.price = row.price
                product.description = row.description
                if row.images:
                    self._set_images(product, row.images)
                updated += 1

        self._db.commit()

        logger.info(f"✅ Imported products: {created} created, {updated} updated")
        return created, updated

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _set_images(product: Product, urls: Sequence[str]) -> None:
        product.images = [
            ProductImage(url=url, position=position)
            for position, url in enumerate(u for u in urls if u and u.strip())
        ]
