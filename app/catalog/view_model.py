"""
==============================================================================
Catalog View Model
==============================================================================

Per-catalog-page controller: fetches one catalog snapshot and derives the
filtered, sorted and paginated product views from user criteria.

Derived values are properties computed on every read, so they always agree
with the current snapshot and criteria; nothing is cached.

Pipeline:
--------
    snapshot ─▶ base_products ─▶ category filter ─▶ search filter ─▶ sort
                     │                                               │
                     ▼                                               ▼
             unique_categories                            filtered_and_sorted
                                                                     │
                                                      total_pages ◀──┤
                                                                     ▼
                                                         paginated_products

Changing the search term, category or sort order sends the view back to
page 1. Page numbers are clamped into [1, total_pages] on read.

==============================================================================
"""

from __future__ import annotations

import logging
import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from app.catalog.models import ALL_CATEGORIES, Catalog, Product, SortOrder, ViewMode
from app.config import get_settings
from app.core import exceptions
from app.core.exceptions import AppException
from app.store.remote import RemoteStore


# Module logger
logger = logging.getLogger(__name__)


def _collation_key(text: str) -> str:
    """Case- and accent-insensitive key for alphabetical ordering."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogViewModel:
    """
    Reactive view over one catalog.

    Attributes:
        catalog: Snapshot from the last successful fetch (None otherwise)
        loading: True while a fetch is in progress (and before the first)
        error: Human-readable error of the last failed fetch
        error_code: Machine-readable code matching ``error``
        failure: AppException of the last failed fetch (carries the HTTP status)
        view_mode: Grid or list presentation flag

    Example:
        >>> vm = await CatalogViewModel.mount(store, "verano")
        >>> vm.search_term = "mesa"
        >>> vm.paginated_products
        [Product(...), ...]
    """

    def __init__(
        self,
        store: RemoteStore,
        slug: str,
        page_size: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_page_change: Optional[Callable[[int], Any]] = None,
    ) -> None:
        """
        Args:
            store: Remote store used for the catalog query
            slug: Catalog slug taken from the route
            page_size: Products per page (settings default if None)
            clock: Wall-clock source for expiry checks
            on_page_change: Hook run after go_to_page (e.g. scroll into view)
        """
        if page_size is not None and page_size < 1:
            raise ValueError("page_size must be at least 1")

        self._store = store
        self._slug = slug
        self._page_size = page_size or get_settings().catalog_page_size
        self._clock = clock or _utcnow
        self._on_page_change = on_page_change

        self.catalog: Optional[Catalog] = None
        self.loading: bool = True
        self.error: Optional[str] = None
        self.error_code: Optional[str] = None
        self.failure: Optional[AppException] = None
        self.view_mode: ViewMode = ViewMode.GRID

        self._search_term = ""
        self._active_category = ALL_CATEGORIES
        self._sort_order = SortOrder.NAME_ASC
        self._current_page = 1

    @classmethod
    async def mount(cls, store: RemoteStore, slug: str, **kwargs: Any) -> CatalogViewModel:
        """Create a view model and run its first fetch."""
        view_model = cls(store, slug, **kwargs)
        await view_model.fetch_catalog()
        return view_model

    # =========================================================================
    # FETCHING
    # =========================================================================

    async def fetch_catalog(self) -> None:
        """
        Fetch the catalog with nested items, products and images.

        Failures never escape: they clear the snapshot and set ``error``.
        """
        self.loading = True
        self.error = None
        self.error_code = None
        self.failure = None

        try:
            data = await self._store.fetch_catalog(self._slug)
            if not data:
                raise exceptions.catalog_not_found(self._slug)

            try:
                catalog = Catalog.model_validate(data)
            except ValidationError as e:
                raise exceptions.malformed_response(
                    f"{e.error_count()} validation error(s)"
                ) from e

            self.catalog = catalog
            logger.info(
                f"Catalog {self._slug!r} loaded with {len(catalog.items)} items"
            )

        except AppException as e:
            logger.warning(f"Catalog {self._slug!r} fetch failed: {e.code} {e.message}")
            self._fail(e)

        except Exception as e:
            logger.exception(f"Unexpected error fetching catalog {self._slug!r}")
            self._fail(exceptions.unexpected_error(str(e)))

        finally:
            self.loading = False

    def _fail(self, failure: AppException) -> None:
        self.catalog = None
        self.error = failure.message
        self.error_code = failure.code
        self.failure = failure

    # =========================================================================
    # CRITERIA
    # =========================================================================

    @property
    def slug(self) -> str:
        return self._slug

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def search_term(self) -> str:
        return self._search_term

    @search_term.setter
    def search_term(self, value: Optional[str]) -> None:
        value = value or ""
        if value != self._search_term:
            self._search_term = value
            self._current_page = 1

    @property
    def active_category(self) -> str:
        return self._active_category

    @active_category.setter
    def active_category(self, value: Optional[str]) -> None:
        value = value or ALL_CATEGORIES
        if value != self._active_category:
            self._active_category = value
            self._current_page = 1

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @sort_order.setter
    def sort_order(self, value: Union[SortOrder, str]) -> None:
        value = SortOrder(value)
        if value != self._sort_order:
            self._sort_order = value
            self._current_page = 1

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    @property
    def is_expired(self) -> bool:
        """True iff an expiration is set and already in the past."""
        if self.catalog is None or self.catalog.expires_at is None:
            return False

        expires_at = self.catalog.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        return expires_at < self._clock()

    @property
    def base_products(self) -> List[Product]:
        """Resolved products of the catalog, in item order."""
        if self.catalog is None:
            return []
        return [item.product for item in self.catalog.items if item.product is not None]

    @property
    def unique_categories(self) -> List[str]:
        """The "Todos" sentinel followed by the sorted distinct categories."""
        categories = {p.category for p in self.base_products if p.has_category}
        return [ALL_CATEGORIES] + sorted(categories, key=lambda c: (_collation_key(c), c))

    @property
    def filtered_and_sorted(self) -> List[Product]:
        products = self.base_products

        if self._active_category != ALL_CATEGORIES:
            products = [p for p in products if p.category == self._active_category]

        if self._search_term:
            needle = self._search_term.lower()
            products = [
                p for p in products
                if needle in p.name.lower() or (p.code and needle in p.code.lower())
            ]

        if self._sort_order is SortOrder.NAME_ASC:
            products = sorted(products, key=lambda p: _collation_key(p.name))
        elif self._sort_order is SortOrder.PRICE_ASC:
            products = sorted(products, key=lambda p: p.price)
        elif self._sort_order is SortOrder.PRICE_DESC:
            products = sorted(products, key=lambda p: p.price, reverse=True)

        return products

    @property
    def total_count(self) -> int:
        return len(self.filtered_and_sorted)

    @property
    def total_pages(self) -> int:
        total = self.total_count
        return (total + self._page_size - 1) // self._page_size if total > 0 else 0

    @property
    def current_page(self) -> int:
        """Current page, clamped into range against the current results."""
        self._current_page = self._clamp(self._current_page, self.total_pages)
        return self._current_page

    @property
    def paginated_products(self) -> List[Product]:
        page = self.current_page
        start = (page - 1) * self._page_size
        return self.filtered_and_sorted[start:start + self._page_size]

    @staticmethod
    def _clamp(page: int, total_pages: int) -> int:
        return max(1, min(page, total_pages or 1))

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def go_to_page(self, page: int) -> int:
        """
        Move to ``page`` (clamped) and run the page-change hook.

        Returns:
            The page actually selected
        """
        self._current_page = self._clamp(page, self.total_pages)
        if self._on_page_change is not None:
            self._on_page_change(self._current_page)
        return self._current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def get_stats(self) -> Dict[str, int]:
        """Counts describing the current view."""
        return {
            "items": len(self.catalog.items) if self.catalog else 0,
            "products": len(self.base_products),
            "matching": self.total_count,
            "pages": self.total_pages,
        }

    def snapshot(self) -> Dict[str, Any]:
        """Serialisable summary of the whole view."""
        catalog = self.catalog
        return {
            "slug": self._slug,
            "name": catalog.name if catalog else None,
            "expires_at": catalog.expires_at if catalog else None,
            "is_expired": self.is_expired,
            "loading": self.loading,
            "error": self.error,
            "categories": self.unique_categories,
            "search_term": self._search_term,
            "active_category": self._active_category,
            "sort_order": self._sort_order.value,
            "view_mode": self.view_mode.value,
            "page": self.current_page,
            "page_size": self._page_size,
            "total": self.total_count,
            "total_pages": self.total_pages,
            "products": [product.model_dump() for product in self.paginated_products],
        }

    def __repr__(self) -> str:
        return (
            f"CatalogViewModel(slug={self._slug!r}, loading={self.loading}, "
            f"error={self.error!r}, page={self._current_page})"
        )
