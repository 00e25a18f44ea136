import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.api.deps import get_db
from backend.app.db.base import Base
from backend.app.db.models import models_v1  # noqa: F401
from backend.app.main import app
from backend.app.schemas.replenishment import Product
from backend.services import catalog
from backend.services.catalog import REFERENCE_CATALOG


def make_product(**overrides) -> Product:
    fields = dict(
        id="T001",
        name="Test Product",
        category="Office Supplies",
        supplier="Office Depot",
        current_stock=10,
        par_level=50,
        reorder_point=20,
        unit_price=1.0,
        unit_of_measure="Each",
        auto_order_enabled=True,
    )
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def reference_catalog() -> list[Product]:
    return list(REFERENCE_CATALOG)


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Session DB isolée par test.

    SQLite en mémoire + StaticPool : une seule connexion partagée,
    visible aussi depuis le threadpool de TestClient. Tout est jeté à la fin.
    """
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session, monkeypatch):
    """Client API, catalogue en mémoire par défaut (CATALOG_SOURCE=memory)."""
    monkeypatch.setattr(catalog, "CATALOG_SOURCE", "memory")

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def db_client(client, monkeypatch):
    monkeypatch.setattr(catalog, "CATALOG_SOURCE", "db")
    return client


@pytest.fixture
def product():
    """Fabrique de Product : valeurs par défaut surchargeables."""
    return make_product
