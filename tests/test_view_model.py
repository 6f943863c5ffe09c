"""
==============================================================================
Catalog View Model Tests
==============================================================================

Tests for fetching, filtering, sorting and pagination of a catalog.

==============================================================================
"""

import asyncio
from datetime import datetime, timezone

import pytest

from app.catalog.models import ALL_CATEGORIES, SortOrder
from app.catalog.view_model import CatalogViewModel
from app.core import exceptions
from app.core.exceptions import CATALOG_NOT_FOUND_MESSAGE, MALFORMED_RESPONSE_MESSAGE


def mount(store, slug="verano", **kwargs) -> CatalogViewModel:
    return asyncio.run(CatalogViewModel.mount(store, slug, **kwargs))


@pytest.fixture
def furniture(make_product):
    return [
        make_product("p1", "Silla Óslo", 45, "Muebles", "SIL-01"),
        make_product("p2", "mesa comedor", 120, "Muebles", "MES-01"),
        make_product("p3", "Lámpara Arco", 80, "Iluminación", "LAM-07"),
        make_product("p4", "Alfombra", 60, None, "ALF-02"),
        make_product("p5", "Banco", 45, "Muebles", "BAN-03"),
        make_product("p6", "Espejo", 30, "  ", "ESP-01"),
    ]


@pytest.fixture
def store(fake_store, make_catalog, furniture):
    fake_store.catalogs["verano"] = make_catalog("verano", furniture + [None])
    return fake_store


def ids(products):
    return [p.id for p in products]


class TestFetch:
    """Tests for the catalog fetch."""

    def test_initial_state_is_loading(self, store):
        """Test a fresh view model is loading with no snapshot."""
        view_model = CatalogViewModel(store, "verano")
        assert view_model.loading is True
        assert view_model.catalog is None
        assert view_model.error is None

    def test_fetch_success(self, store):
        """Test a successful fetch stores the snapshot."""
        view_model = mount(store)
        assert view_model.loading is False
        assert view_model.error is None
        assert view_model.catalog.slug == "verano"
        assert len(view_model.catalog.items) == 7

    def test_unknown_slug(self, store):
        """Test a missing catalog yields the not-found message."""
        view_model = mount(store, "no-existe")
        assert view_model.loading is False
        assert view_model.catalog is None
        assert view_model.error == CATALOG_NOT_FOUND_MESSAGE
        assert view_model.error_code == "CATALOG_NOT_FOUND"

    def test_store_error_message_passes_through(self, store):
        """Test a store failure keeps the store's message."""
        store.fail_with = exceptions.remote_error("connection refused")
        view_model = mount(store)
        assert view_model.error == "connection refused"
        assert view_model.error_code == "REMOTE_ERROR"
        assert view_model.failure.status_code == 502
        assert view_model.loading is False

    def test_unexpected_error(self, store):
        """Test an arbitrary exception is captured, not raised."""
        store.fail_with = RuntimeError("boom")
        view_model = mount(store)
        assert view_model.error == "boom"
        assert view_model.error_code == "UNEXPECTED_ERROR"
        assert view_model.failure.status_code == 500

    def test_malformed_response(self, store):
        """Test a response missing required keys is reported as malformed."""
        store.catalogs["roto"] = {"catalogo_items": "not-a-list"}
        view_model = mount(store, "roto")
        assert view_model.error == MALFORMED_RESPONSE_MESSAGE
        assert view_model.catalog is None

    def test_refetch_clears_previous_error(self, store, make_catalog):
        """Test a later successful fetch clears the stored error."""
        view_model = mount(store, "tarde")
        assert view_model.error is not None

        store.catalogs["tarde"] = make_catalog("tarde", [])
        asyncio.run(view_model.fetch_catalog())
        assert view_model.error is None
        assert view_model.failure is None
        assert view_model.catalog is not None

    def test_invalid_page_size(self, store):
        """Test page_size below one is rejected."""
        with pytest.raises(ValueError):
            CatalogViewModel(store, "verano", page_size=0)


class TestDerivedViews:
    """Tests for base products, categories and filters."""

    def test_base_products_skip_dangling_items(self, store):
        """Test items without a product are excluded."""
        view_model = mount(store)
        assert ids(view_model.base_products) == ["p1", "p2", "p3", "p4", "p5", "p6"]

    def test_unique_categories(self, store):
        """Test categories are distinct, sorted and headed by the sentinel."""
        view_model = mount(store)
        assert view_model.unique_categories == [ALL_CATEGORIES, "Iluminación", "Muebles"]

    def test_category_filter(self, store):
        """Test category filter is an exact match."""
        view_model = mount(store)
        view_model.active_category = "Muebles"
        assert set(ids(view_model.filtered_and_sorted)) == {"p1", "p2", "p5"}

    def test_search_matches_name_or_code(self, store):
        """Test search is a case-insensitive substring on name or code."""
        view_model = mount(store)
        view_model.search_term = "MESA"
        assert ids(view_model.filtered_and_sorted) == ["p2"]

        view_model.search_term = "lam-0"
        assert ids(view_model.filtered_and_sorted) == ["p3"]

    def test_filters_commute(self, store):
        """Test the result does not depend on the order criteria are set."""
        first = mount(store)
        first.active_category = "Muebles"
        first.search_term = "o"

        second = mount(store)
        second.search_term = "o"
        second.active_category = "Muebles"

        assert ids(first.filtered_and_sorted) == ids(second.filtered_and_sorted)
        assert set(ids(first.filtered_and_sorted)) == {"p1", "p2", "p5"}

    def test_no_match(self, store):
        """Test an unmatched search yields no pages."""
        view_model = mount(store)
        view_model.search_term = "zzz"
        assert view_model.filtered_and_sorted == []
        assert view_model.total_pages == 0
        assert view_model.current_page == 1
        assert view_model.paginated_products == []


class TestSorting:
    """Tests for the sort orders."""

    def test_name_sort_ignores_case_and_accents(self, store):
        """Test name sort is case- and accent-insensitive."""
        view_model = mount(store)
        names = [p.name for p in view_model.filtered_and_sorted]
        assert names == ["Alfombra", "Banco", "Espejo", "Lámpara Arco", "mesa comedor", "Silla Óslo"]

    def test_price_ascending_is_stable(self, store):
        """Test equal prices keep catalog order."""
        view_model = mount(store)
        view_model.sort_order = SortOrder.PRICE_ASC
        assert ids(view_model.filtered_and_sorted) == ["p6", "p1", "p5", "p4", "p3", "p2"]

    def test_price_descending_is_stable(self, store):
        """Test descending price sort keeps catalog order on ties."""
        view_model = mount(store)
        view_model.sort_order = "precio-desc"
        assert ids(view_model.filtered_and_sorted) == ["p2", "p3", "p4", "p1", "p5", "p6"]

    def test_name_sort_keeps_order_of_equal_names(self, fake_store, make_catalog, make_product):
        """Test names differing only in case keep catalog order."""
        fake_store.catalogs["sillas"] = make_catalog("sillas", [
            make_product("a", "silla"),
            make_product("b", "Silla"),
            make_product("c", "SILLA"),
        ])
        view_model = mount(fake_store, "sillas")
        assert ids(view_model.filtered_and_sorted) == ["a", "b", "c"]

    def test_unknown_sort_order_rejected(self, store):
        """Test an unknown sort key raises."""
        view_model = mount(store)
        with pytest.raises(ValueError):
            view_model.sort_order = "color"


class TestPagination:
    """Tests for page counting, clamping and resets."""

    @pytest.fixture
    def big_store(self, fake_store, make_catalog, make_product):
        products = [make_product(f"p{i:02d}", f"Producto {i:02d}", i) for i in range(33)]
        fake_store.catalogs["grande"] = make_catalog("grande", products)
        return fake_store

    def test_total_pages(self, big_store):
        """Test 33 items at 16 per page give 3 pages, the last with 1 item."""
        view_model = mount(big_store, "grande", page_size=16)
        assert view_model.total_count == 33
        assert view_model.total_pages == 3

        view_model.go_to_page(3)
        assert len(view_model.paginated_products) == 1

    def test_search_change_resets_page(self, big_store):
        """Test a new search term sends the view back to page 1."""
        view_model = mount(big_store, "grande", page_size=16)
        view_model.go_to_page(3)
        view_model.search_term = "x"
        assert view_model.current_page == 1

    def test_same_value_keeps_page(self, big_store):
        """Test re-setting an unchanged criterion keeps the page."""
        view_model = mount(big_store, "grande", page_size=16)
        view_model.go_to_page(2)
        view_model.sort_order = SortOrder.NAME_ASC
        view_model.active_category = ALL_CATEGORIES
        assert view_model.current_page == 2

    def test_page_clamped(self, big_store):
        """Test out-of-range pages are clamped."""
        view_model = mount(big_store, "grande", page_size=16)
        assert view_model.go_to_page(99) == 3
        assert view_model.go_to_page(-4) == 1

    def test_page_clamped_when_results_shrink(self, big_store):
        """Test the current page follows a shrinking page count on read."""
        pages = []
        view_model = mount(big_store, "grande", page_size=16, on_page_change=pages.append)
        view_model.go_to_page(3)
        view_model.catalog.items = view_model.catalog.items[:10]
        assert view_model.total_pages == 1
        assert view_model.current_page == 1
        assert pages == [3]

    def test_next_and_previous(self, big_store):
        """Test relative navigation stays within range."""
        view_model = mount(big_store, "grande", page_size=16)
        assert view_model.next_page() == 2
        assert view_model.next_page() == 3
        assert view_model.next_page() == 3
        assert view_model.previous_page() == 2


class TestExpiry:
    """Tests for the expiration flag."""

    @staticmethod
    def clock():
        return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_not_expired_without_date(self, fake_store, make_catalog):
        """Test a catalog without expiration never expires."""
        fake_store.catalogs["libre"] = make_catalog("libre", [])
        view_model = mount(fake_store, "libre", clock=self.clock)
        assert view_model.is_expired is False

    def test_expired(self, fake_store, make_catalog):
        """Test a past expiration is reported."""
        fake_store.catalogs["viejo"] = make_catalog("viejo", [], "2025-05-31T23:59:59+00:00")
        view_model = mount(fake_store, "viejo", clock=self.clock)
        assert view_model.is_expired is True

    def test_expiry_instant_is_not_expired(self, fake_store, make_catalog):
        """Test a catalog is still valid at its exact expiration instant."""
        fake_store.catalogs["justo"] = make_catalog("justo", [], "2025-06-01T12:00:00+00:00")
        view_model = mount(fake_store, "justo", clock=self.clock)
        assert view_model.is_expired is False

    def test_naive_date_treated_as_utc(self, fake_store, make_catalog):
        """Test an expiration without offset is compared as UTC."""
        fake_store.catalogs["futuro"] = make_catalog("futuro", [], "2025-06-01T12:30:00")
        view_model = mount(fake_store, "futuro", clock=self.clock)
        assert view_model.is_expired is False
