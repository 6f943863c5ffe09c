"""
==============================================================================
Catalog Service Module
==============================================================================

Catalog administration: shareable product collections reachable at
``/c/<slug>``.

Slugs are normalized and validated by SlugValidator and must be unique.
The item list is stored in the order the product ids were given.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core import exceptions
from app.db.models import Catalog, CatalogItem, Product
from app.schemas.catalog import CatalogCreate, CatalogUpdate
from app.utils.validators import SlugValidator


# Module logger
logger = logging.getLogger(__name__)


class CatalogService:
    """
    Catalog management service for admin operations.

    Example:
        >>> service = CatalogService(db_session)
        >>> catalog = service.create_catalog(CatalogCreate(
        ...     slug="Verano 2025",
        ...     product_ids=[mesa.id, silla.id]
        ... ))
        >>> catalog.slug
        'verano-2025'
    """

    def __init__(self, db: Session, validator: Optional[SlugValidator] = None) -> None:
        self._db = db
        self._validator = validator or SlugValidator()

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    def create_catalog(self, data: CatalogCreate) -> Catalog:
        """
        Create a catalog with its items.

        Raises:
            AppException: INVALID_SLUG, SLUG_EXISTS, PRODUCT_NOT_FOUND
        """
        slug = self._validate_slug(data.slug)
        self._ensure_slug_free(slug)

        catalog = Catalog(slug=slug, name=data.name, expires_at=data.expires_at)
        catalog.items = self._build_items(data.product_ids)

        try:
            self._db.add(catalog)
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise exceptions.slug_exists(slug)

        logger.info(f"✅ Catalog created: {slug} ({len(catalog.items)} items)")
        return self.get_by_id(catalog.id)

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def get_by_id(self, catalog_id: str) -> Catalog:
        """
        Get catalog by ID.

        Raises:
            AppException: CATALOG_RECORD_NOT_FOUND if catalog doesn't exist
        """
        catalog = (
            self._db.query(Catalog)
            .options(selectinload(Catalog.items))
            .filter(Catalog.id == catalog_id)
            .first()
        )

        if not catalog:
            logger.warning(f"Catalog not found: {catalog_id}")
            raise exceptions.catalog_record_not_found(catalog_id)

        return catalog

    def list_catalogs(self, offset: int = 0, limit: int = 20) -> Tuple[List[Catalog], int]:
        """Newest catalogs first."""
        query = self._db.query(Catalog)
        total = query.count()
        catalogs = (
            query.options(selectinload(Catalog.items))
            .order_by(Catalog.created_at.desc(), Catalog.slug.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return catalogs, total

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    def update_catalog(self, catalog_id: str, data: CatalogUpdate) -> Catalog:
        """
        Apply a partial update; ``product_ids`` replaces the items.

        Raises:
            AppException: CATALOG_RECORD_NOT_FOUND, INVALID_SLUG, SLUG_EXISTS
        """
        catalog = self.get_by_id(catalog_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("slug") is not None:
            slug = self._validate_slug(changes["slug"])
            if slug != catalog.slug:
                self._ensure_slug_free(slug)
                catalog.slug = slug

        if "name" in changes:
            catalog.name = changes["name"]

        if "expires_at" in changes:
            catalog.expires_at = changes["expires_at"]

        if changes.get("product_ids") is not None:
            catalog.items = self._build_items(changes["product_ids"])

        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            raise exceptions.slug_exists(catalog.slug)

        logger.info(f"✅ Catalog updated: {catalog.slug}")
        return self.get_by_id(catalog_id)

    # =========================================================================
    # DELETE OPERATIONS
    # =========================================================================

    def delete_catalog(self, catalog_id: str) -> None:
        catalog = self.get_by_id(catalog_id)
        self._db.delete(catalog)
        self._db.commit()
        logger.info(f"🗑️ Catalog deleted: {catalog.slug}")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _validate_slug(self, raw: str) -> str:
        is_valid, slug, error = self._validator.validate(raw)
        if not is_valid:
            raise exceptions.invalid_slug(raw, error)
        return slug

    def _ensure_slug_free(self, slug: str) -> None:
        if self._db.query(Catalog.id).filter(Catalog.slug == slug).first():
            logger.warning(f"Catalog slug already in use: {slug}")
            raise exceptions.slug_exists(slug)

    def _build_items(self, product_ids: Sequence[str]) -> List[CatalogItem]:
        """Items in the given order; every id must exist."""
        product_ids = list(dict.fromkeys(product_ids))
        if not product_ids:
            return []

        found = {
            row.id for row in
            self._db.query(Product.id).filter(Product.id.in_(product_ids)).all()
        }
        for product_id in product_ids:
            if product_id not in found:
                raise exceptions.product_not_found(product_id)

        return [
            CatalogItem(product_id=product_id, position=position)
            for position, product_id in enumerate(product_ids)
        ]
