"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints and page routes.

==============================================================================
"""

from typing import List

import pytest
from fastapi.testclient import TestClient

from app.core import exceptions
from app.core.context import StorefrontContext
from app.core.exceptions import CATALOG_NOT_FOUND_MESSAGE, MALFORMED_RESPONSE_MESSAGE, AppException
from app.db.models import Catalog, Product, User
from app.services.product_service import ProductService


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ["healthy", "degraded"]
        assert data["components"]["site_config"] == "not_loaded"

    def test_readiness_probe(self, client: TestClient):
        """Test readiness probe."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True


class TestAuthEndpoints:
    """Tests for authentication endpoints."""

    def test_login_success(self, client: TestClient, admin_user: User):
        """Test successful login returns a token and sets the cookie."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "Admin", "password": "admin123"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["access_token"]
        assert data["user"]["username"] == admin_user.username
        assert "session" in response.cookies

    def test_login_invalid_password(self, client: TestClient, admin_user: User):
        """Test login with invalid password."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": admin_user.username, "password": "wrongpassword"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_login_user_not_found(self, client: TestClient):
        """Test login with nonexistent user."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "nonexistent", "password": "password123"}
        )
        assert response.status_code == 401

    def test_login_disabled_account(self, client: TestClient, disabled_user: User):
        """Test a disabled account cannot sign in."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "retired", "password": "retired123"}
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ACCOUNT_DISABLED"

    def test_session_status(self, client: TestClient, admin_headers: dict):
        """Test session presence with and without a token."""
        anonymous = client.get("/api/v1/auth/session").json()
        assert anonymous["authenticated"] is False

        signed_in = client.get("/api/v1/auth/session", headers=admin_headers).json()
        assert signed_in["authenticated"] is True
        assert signed_in["username"] == "admin"


class TestCatalogView:
    """Tests for the public catalog view."""

    def test_default_view(self, client: TestClient, catalog: Catalog):
        """Test the first page sorted by name with all categories."""
        response = client.get("/api/v1/catalogos/verano")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Verano"
        assert data["is_expired"] is False
        assert data["categories"] == ["Todos", "Iluminación", "Muebles"]
        assert data["total"] == 5
        assert data["total_pages"] == 1
        assert [p["name"] for p in data["products"]] == [
            "Alfombra", "Banco", "Lámpara Arco", "mesa comedor", "Silla Óslo"
        ]
        silla = data["products"][-1]
        assert silla["images"][0]["url"] == "https://img.example/silla.jpg"

    def test_filter_and_price_sort(self, client: TestClient, catalog: Catalog):
        """Test category filter with a stable price sort."""
        response = client.get(
            "/api/v1/catalogos/verano",
            params={"categoria": "Muebles", "orden": "precio-asc", "vista": "list"}
        )
        data = response.json()
        assert [p["name"] for p in data["products"]] == ["Silla Óslo", "Banco", "mesa comedor"]
        assert data["view_mode"] == "list"
        assert data["active_category"] == "Muebles"

    def test_search(self, client: TestClient, catalog: Catalog):
        """Test search by code."""
        data = client.get("/api/v1/catalogos/verano", params={"q": "lam"}).json()
        assert [p["code"] for p in data["products"]] == ["LAM-07"]
        assert data["search_term"] == "lam"

    def test_page_clamped(self, client: TestClient, catalog: Catalog):
        """Test a page beyond the last one is clamped."""
        data = client.get("/api/v1/catalogos/verano", params={"pagina": 9}).json()
        assert data["page"] == 1

    def test_unknown_slug(self, client: TestClient):
        """Test a missing catalog answers 404 with the not-found message."""
        response = client.get("/api/v1/catalogos/no-existe")
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "CATALOG_NOT_FOUND"
        assert error["message"] == CATALOG_NOT_FOUND_MESSAGE

    def test_store_failure(self, client: TestClient, context: StorefrontContext, fake_store):
        """Test a failing store answers 502 with the store's message."""
        fake_store.fail_with = exceptions.remote_error("connection refused")
        context.store = fake_store

        response = client.get("/api/v1/catalogos/verano")
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "REMOTE_ERROR"
        assert error["message"] == "connection refused"
        assert error["details"] == {"slug": "verano"}

    def test_malformed_catalog(self, client: TestClient, context: StorefrontContext, fake_store):
        """Test a catalog row that does not validate answers 502."""
        fake_store.catalogs["roto"] = {"catalogo_items": "not-a-list"}
        context.store = fake_store

        response = client.get("/api/v1/catalogos/roto")
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "MALFORMED_RESPONSE"
        assert error["message"] == MALFORMED_RESPONSE_MESSAGE
        assert error["details"]["slug"] == "roto"

    def test_invalid_sort_order(self, client: TestClient, catalog: Catalog):
        """Test an unknown sort order is rejected."""
        response = client.get("/api/v1/catalogos/verano", params={"orden": "color"})
        assert response.status_code == 422


class TestShortlistEndpoints:
    """Tests for the quote shortlist endpoints."""

    def test_add_remove_clear(self, client: TestClient):
        """Test the basic selection lifecycle."""
        assert client.post("/api/v1/cotizacion/p1").json()["count"] == 1
        assert client.post("/api/v1/cotizacion/p1").json()["count"] == 1
        assert client.post("/api/v1/cotizacion/p2").json()["product_ids"] == ["p1", "p2"]

        assert client.delete("/api/v1/cotizacion/p1").json()["product_ids"] == ["p2"]
        assert client.delete("/api/v1/cotizacion").json()["count"] == 0

    def test_toggle_shows_toast(self, client: TestClient, context: StorefrontContext):
        """Test toggling flips membership and announces it."""
        first = client.post("/api/v1/cotizacion/p1/toggle").json()
        assert first["selected"] is True
        assert context.toast.toast.message == "Producto añadido a la cotización"

        second = client.post("/api/v1/cotizacion/p1/toggle").json()
        assert second["selected"] is False
        assert second["count"] == 0

        toast = client.get("/api/v1/toast").json()
        assert toast["visible"] is True
        assert toast["message"] == "Producto quitado de la cotización"
        assert toast["kind"] == "info"

    def test_selection_is_process_wide(self, client: TestClient):
        """Test the selection is shared across requests."""
        client.post("/api/v1/cotizacion/p9")
        assert client.get("/api/v1/cotizacion").json()["product_ids"] == ["p9"]


class TestSiteEndpoints:
    """Tests for site configuration and toast endpoints."""

    def test_config_loaded_once(self, client: TestClient, site_configuration, context):
        """Test the configuration is fetched and cached."""
        response = client.get("/api/v1/config")
        assert response.status_code == 200
        assert response.json()["config"]["nombre_sitio"] == "Catálogo"
        assert context.site_config.is_loaded

    def test_config_missing_row(self, client: TestClient):
        """Test a missing row yields no config and no error."""
        data = client.get("/api/v1/config").json()
        assert data["config"] is None
        assert data["error"] is None

    def test_hide_toast(self, client: TestClient, context: StorefrontContext, scheduler):
        """Test the toast can be dismissed and expires on its own."""
        context.toast.show("Hola", "info", 1000)
        assert client.delete("/api/v1/toast").json()["visible"] is False

        context.toast.show("Otra vez", "info", 1000)
        scheduler.advance(1)
        assert client.get("/api/v1/toast").json()["visible"] is False


class TestPageRoutes:
    """Tests for guarded page routes."""

    def test_admin_page_redirects_to_login(self, client: TestClient):
        """Test an anonymous admin navigation goes to /login."""
        response = client.get("/admin/productos", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_admin_page_with_session(self, client: TestClient, admin_headers: dict):
        """Test an admin page resolves with a session."""
        response = client.get("/admin/productos/editar/abc", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["route"] == "admin-productos-editar"
        assert data["layout"] == "admin"
        assert data["params"] == {"id": "abc"}
        assert data["authenticated"] is True
        assert data["config"] is None

    def test_admin_page_with_cookie(self, client: TestClient, admin_user: User):
        """Test the login cookie opens the admin pages."""
        client.post("/api/v1/auth/login", json={"username": "admin", "password": "admin123"})
        response = client.get("/admin/catalogos", follow_redirects=False)
        assert response.status_code == 200

    def test_admin_root_redirect(self, client: TestClient, admin_headers: dict):
        """Test /admin redirects to the product list."""
        response = client.get("/admin", headers=admin_headers, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/admin/productos"

    def test_public_page_carries_config(self, client: TestClient, site_configuration):
        """Test public pages load and expose the site configuration."""
        response = client.get("/categorias/muebles")
        assert response.status_code == 200
        data = response.json()
        assert data["layout"] == "public"
        assert data["params"] == {"slug": "muebles"}
        assert data["config"]["nombre_sitio"] == "Catálogo"

    def test_standalone_page(self, client: TestClient):
        """Test the shared catalog page is public and standalone."""
        data = client.get("/c/verano").json()
        assert data["route"] == "catalogo-publico"
        assert data["layout"] == "standalone"
        assert data["config"] is None

    def test_unknown_page(self, client: TestClient):
        """Test unknown paths answer 404."""
        response = client.get("/no/existe")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ROUTE_NOT_FOUND"


class TestAdminProducts:
    """Tests for product administration."""

    def test_requires_session(self, client: TestClient):
        """Test admin endpoints reject anonymous calls."""
        response = client.get("/api/v1/admin/productos")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_REQUIRED"

    def test_list_products(self, client: TestClient, admin_headers: dict, products: List[Product]):
        """Test listing with search and pagination."""
        data = client.get(
            "/api/v1/admin/productos",
            headers=admin_headers,
            params={"page_size": 2}
        ).json()
        assert data["total"] == 5
        assert data["pages"] == 3
        assert len(data["items"]) == 2

        found = client.get(
            "/api/v1/admin/productos",
            headers=admin_headers,
            params={"q": "mes"}
        ).json()
        assert [p["code"] for p in found["items"]] == ["MES-01"]

    def test_crud(self, client: TestClient, admin_headers: dict, context: StorefrontContext):
        """Test create, read, update and delete of a product."""
        response = client.post(
            "/api/v1/admin/productos",
            headers=admin_headers,
            json={
                "nombre": "Cojín",
                "codigo": "COJ-01",
                "categoria": "Textiles",
                "precio": 15.5,
                "imagenes": ["https://img.example/a.jpg", "https://img.example/b.jpg"]
            }
        )
        assert response.status_code == 201
        product = response.json()["product"]
        assert product["name"] == "Cojín"
        assert [i["position"] for i in product["images"]] == [0, 1]
        assert context.toast.toast.message == "Producto creado correctamente"

        product_id = product["id"]
        fetched = client.get(f"/api/v1/admin/productos/{product_id}", headers=admin_headers)
        assert fetched.json()["product"]["price"] == 15.5

        updated = client.put(
            f"/api/v1/admin/productos/{product_id}",
            headers=admin_headers,
            json={"precio": 18, "imagenes": []}
        ).json()["product"]
        assert updated["price"] == 18
        assert updated["images"] == []
        assert updated["name"] == "Cojín"

        deleted = client.delete(f"/api/v1/admin/productos/{product_id}", headers=admin_headers)
        assert deleted.status_code == 200

        missing = client.get(f"/api/v1/admin/productos/{product_id}", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_deleted_product_leaves_catalog(
        self,
        client: TestClient,
        admin_headers: dict,
        catalog: Catalog,
        products: List[Product]
    ):
        """Test a deleted product disappears from catalog views."""
        client.delete(f"/api/v1/admin/productos/{products[0].id}", headers=admin_headers)
        data = client.get("/api/v1/catalogos/verano").json()
        assert data["total"] == 4
        assert "Silla Óslo" not in [p["name"] for p in data["products"]]

    def test_import_grouped_and_flat(
        self,
        client: TestClient,
        admin_headers: dict,
        products: List[Product]
    ):
        """Test import creates new rows and updates rows with a known code."""
        grouped = client.post(
            "/api/v1/admin/productos/importar",
            headers=admin_headers,
            json={"Textiles": [{"nombre": "Cojín", "codigo": "COJ-01", "precio": 15}]}
        ).json()
        assert grouped["created"] == 1
        assert grouped["updated"] == 0

        flat = client.post(
            "/api/v1/admin/productos/importar",
            headers=admin_headers,
            json=[
                {"nombre": "Silla Óslo II", "codigo": "SIL-01", "categoria": "Muebles", "precio": 50},
                {"nombre": "Puff", "precio": 25},
            ]
        ).json()
        assert flat["created"] == 1
        assert flat["updated"] == 1
        assert flat["total"] == 2

        found = client.get(
            "/api/v1/admin/productos",
            headers=admin_headers,
            params={"categoria": "Textiles"}
        ).json()
        assert [p["name"] for p in found["items"]] == ["Cojín"]

    def test_import_invalid_row(self, client: TestClient, admin_headers: dict):
        """Test an invalid row rejects the whole import."""
        response = client.post(
            "/api/v1/admin/productos/importar",
            headers=admin_headers,
            json=[{"nombre": "Puff"}, {"precio": 3}]
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["row"] == 1

    def test_import_malformed_group_rejected(self):
        """Test a category group that is not a list of rows rejects the import."""
        with pytest.raises(AppException) as exc_info:
            ProductService.parse_import({"Textiles": "Cojín"})
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details == {"category": "Textiles"}

        with pytest.raises(AppException) as exc_info:
            ProductService.parse_import({"Textiles": [{"nombre": "Cojín"}, "Puff"]})
        assert exc_info.value.status_code == 422
        assert exc_info.value.details == {"row": 1, "category": "Textiles"}


class TestAdminCatalogs:
    """Tests for catalog administration."""

    def test_create_and_view(self, client: TestClient, admin_headers: dict, products: List[Product]):
        """Test a created catalog is reachable by its normalized slug."""
        response = client.post(
            "/api/v1/admin/catalogos",
            headers=admin_headers,
            json={
                "slug": "Otoño 2025",
                "name": "Otoño",
                "product_ids": [products[2].id, products[0].id]
            }
        )
        assert response.status_code == 201
        catalog = response.json()["catalog"]
        assert catalog["slug"] == "otono-2025"
        assert [i["product_id"] for i in catalog["items"]] == [products[2].id, products[0].id]

        view = client.get("/api/v1/catalogos/otono-2025").json()
        assert view["total"] == 2

    def test_duplicate_slug(self, client: TestClient, admin_headers: dict, catalog: Catalog):
        """Test slugs must be unique."""
        response = client.post(
            "/api/v1/admin/catalogos",
            headers=admin_headers,
            json={"slug": "verano"}
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SLUG_EXISTS"

    @pytest.mark.parametrize("slug", ["ab", "con/barra", "--"])
    def test_invalid_slug(self, client: TestClient, admin_headers: dict, slug: str):
        """Test malformed slugs are rejected."""
        response = client.post(
            "/api/v1/admin/catalogos",
            headers=admin_headers,
            json={"slug": slug}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_SLUG"

    def test_unknown_product(self, client: TestClient, admin_headers: dict):
        """Test items must point at existing products."""
        response = client.post(
            "/api/v1/admin/catalogos",
            headers=admin_headers,
            json={"slug": "vacio", "product_ids": ["missing"]}
        )
        assert response.status_code == 404

    def test_update_and_delete(
        self,
        client: TestClient,
        admin_headers: dict,
        catalog: Catalog,
        products: List[Product]
    ):
        """Test replacing items and deleting a catalog."""
        updated = client.put(
            f"/api/v1/admin/catalogos/{catalog.id}",
            headers=admin_headers,
            json={"name": "Verano 2", "product_ids": [products[1].id]}
        ).json()["catalog"]
        assert updated["name"] == "Verano 2"
        assert len(updated["items"]) == 1

        assert client.get("/api/v1/catalogos/verano").json()["total"] == 1

        deleted = client.delete(f"/api/v1/admin/catalogos/{catalog.id}", headers=admin_headers)
        assert deleted.status_code == 200
        assert client.get("/api/v1/catalogos/verano").status_code == 404

        missing = client.get(f"/api/v1/admin/catalogos/{catalog.id}", headers=admin_headers)
        assert missing.json()["error"]["code"] == "CATALOG_RECORD_NOT_FOUND"


class TestAdminConfiguration:
    """Tests for site configuration administration."""

    def test_update_invalidates_cache(
        self,
        client: TestClient,
        admin_headers: dict,
        site_configuration,
        context: StorefrontContext
    ):
        """Test saving the configuration reloads the public copy."""
        assert client.get("/api/v1/config").json()["config"]["nombre_sitio"] == "Catálogo"

        response = client.put(
            "/api/v1/admin/configuracion",
            headers=admin_headers,
            json={"config": {"nombre_sitio": "Mi Tienda"}}
        )
        assert response.status_code == 200
        assert context.toast.toast.message == "Configuración guardada"

        assert client.get("/api/v1/config").json()["config"] == {"nombre_sitio": "Mi Tienda"}

        stored = client.get("/api/v1/admin/configuracion", headers=admin_headers).json()
        assert stored["config"] == {"nombre_sitio": "Mi Tienda"}

    def test_requires_session(self, client: TestClient):
        """Test the configuration cannot be changed anonymously."""
        response = client.put("/api/v1/admin/configuracion", json={"config": {}})
        assert response.status_code == 401
