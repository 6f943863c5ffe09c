"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client, session, fake store and fake timer fixtures.

==============================================================================
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generator, List, Optional

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.context import StorefrontContext
from app.core.security import get_security_manager
# Import get_db from the correct location - this is what the API endpoints use
from app.core.dependencies import get_db
from app.db.database import Base, enable_sqlite_foreign_keys
from app.db.models import Catalog, CatalogItem, Product, ProductImage, SiteConfiguration, User
from app.db.init_db import DEFAULT_SITE_CONFIG
from app.store.remote import RemoteStore, SessionInfo, SqlRemoteStore


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


# ============================================================================
# FAKE TIMERS
# ============================================================================

class FakeTimer:
    """Handle returned by FakeScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock with the call_later shape used by ToastNotifier."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in sorted(self.pending, key=lambda t: t.due):
            if timer.due <= self.now:
                timer.fired = True
                timer.callback()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


# ============================================================================
# FAKE STORE
# ============================================================================

class FakeStore(RemoteStore):
    """In-memory RemoteStore counting calls and optionally failing."""

    def __init__(
        self,
        catalogs: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
        sessions: Optional[Dict[str, SessionInfo]] = None
    ) -> None:
        self.catalogs = catalogs or {}
        self.config = config
        self.sessions = sessions or {}
        self.fail_with: Optional[Exception] = None
        self.catalog_calls = 0
        self.config_calls = 0

    async def fetch_catalog(self, slug: str) -> Optional[Dict[str, Any]]:
        self.catalog_calls += 1
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return self.catalogs.get(slug)

    async def fetch_site_config(self) -> Optional[Dict[str, Any]]:
        self.config_calls += 1
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        return self.config

    async def get_session(self, token: Optional[str]) -> Optional[SessionInfo]:
        if not token:
            return None
        return self.sessions.get(token)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore(config={"nombre_sitio": "Tienda de prueba"})


def product_row(
    product_id: str,
    nombre: str,
    precio: float = 0,
    categoria: Optional[str] = None,
    codigo: Optional[str] = None
) -> Dict[str, Any]:
    """Product shaped like the remote response."""
    return {
        "id": product_id,
        "nombre": nombre,
        "codigo": codigo,
        "categoria": categoria,
        "precio": precio,
        "descripcion": None,
        "producto_imagenes": [],
    }


def catalog_row(
    slug: str,
    products: List[Optional[Dict[str, Any]]],
    fecha_caducidad: Optional[str] = None
) -> Dict[str, Any]:
    """Catalog shaped like the remote response; None entries are dangling items."""
    return {
        "id": f"cat-{slug}",
        "slug": slug,
        "nombre": slug.title(),
        "fecha_caducidad": fecha_caducidad,
        "catalogo_items": [
            {"id": index, "orden": index, "productos": product}
            for index, product in enumerate(products)
        ],
    }


@pytest.fixture
def make_product() -> Callable[..., Dict[str, Any]]:
    return product_row


@pytest.fixture
def make_catalog() -> Callable[..., Dict[str, Any]]:
    return catalog_row


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def context(db: Session, scheduler: FakeScheduler) -> Generator[StorefrontContext, None, None]:
    """Fresh process-wide state backed by the test database."""
    previous = app.state.context
    context = StorefrontContext.create(SqlRemoteStore(TestingSessionLocal), scheduler=scheduler)
    app.state.context = context
    try:
        yield context
    finally:
        app.state.context = previous


@pytest.fixture(scope="function")
def client(db: Session, context: StorefrontContext) -> Generator[TestClient, None, None]:
    """Create test client with database and context overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    # Override the get_db dependency from app.core.dependencies
    app.dependency_overrides[get_db] = override_get_db

    # Startup is skipped: tables come from the db fixture
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        test_client.close()
        app.dependency_overrides.clear()


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def admin_user(db: Session) -> User:
    """Create an admin user in the test database."""
    security = get_security_manager()
    user = User(
        username="admin",
        password_hash=security.hash_password("admin123"),
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def disabled_user(db: Session) -> User:
    """Create a disabled account in the test database."""
    security = get_security_manager()
    user = User(
        username="retired",
        password_hash=security.hash_password("retired123"),
        is_active=False
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_token(admin_user: User) -> str:
    """Create session token for the admin user."""
    security = get_security_manager()
    return security.create_session_token({
        "sub": admin_user.id,
        "username": admin_user.username,
    })


@pytest.fixture
def admin_headers(admin_token: str) -> Dict[str, str]:
    """Authorization headers for the admin user."""
    return {"Authorization": f"Bearer {admin_token}"}


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture
def site_configuration(db: Session) -> SiteConfiguration:
    row = SiteConfiguration(id=True, config_json=dict(DEFAULT_SITE_CONFIG))
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def products(db: Session) -> List[Product]:
    """Five products across two categories plus one uncategorized."""
    rows = [
        Product(name="Silla Óslo", code="SIL-01", category="Muebles", price=45.0),
        Product(name="mesa comedor", code="MES-01", category="Muebles", price=120.0),
        Product(name="Lámpara Arco", code="LAM-07", category="Iluminación", price=80.0),
        Product(name="Alfombra", code="ALF-02", category=None, price=60.0),
        Product(name="Banco", code="BAN-03", category="Muebles", price=45.0),
    ]
    rows[0].images = [ProductImage(url="https://img.example/silla.jpg", position=0)]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def catalog(db: Session, products: List[Product]) -> Catalog:
    """Catalog "verano" holding every product in fixture order."""
    record = Catalog(
        slug="verano",
        name="Verano",
        expires_at=datetime.now(timezone.utc) + timedelta(days=30),
    )
    record.items = [
        CatalogItem(product_id=product.id, position=position)
        for position, product in enumerate(products)
    ]
    db.add(record)
    db.commit()
    return record
