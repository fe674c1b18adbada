import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import Base, build_engine, build_session_factory, get_session
from app.routers.products import get_product_service
from app.services.product_service import ProductService


@pytest.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def service(session):
    return ProductService(session)


@pytest.fixture
def product_payload():
    return {
        "name": "iPhone 15 Pro",
        "description": "Latest Apple iPhone with advanced camera system and A17 Pro chip",
        "price": 999.99,
        "category": "Electronics",
        "stock": 25,
    }


@pytest.fixture
async def client(session_factory):
    """Async test client backed by the in-memory database."""
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def mock_service():
    """Mock catalog store for testing the API layer without a database."""
    return AsyncMock(spec=ProductService)


@pytest.fixture
async def mock_client(mock_service):
    """Async test client whose routes talk to mock_service."""
    app.dependency_overrides[get_product_service] = lambda: mock_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
