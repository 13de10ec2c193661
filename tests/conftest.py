"""Pytest configuration and fixtures for the catalog discovery service."""

from datetime import UTC, datetime

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from src.models.product import Product
from src.models.review import RatingEvent
from src.services.queue.review_changes import ReviewChangePublisher
from src.services.storage.catalog_store import CatalogStore, get_catalog_store
from src.services.storage.ratings_store import RatingsStore, get_ratings_store
from src.services.storage.review_store import ReviewStore, get_review_store
from src.services.storage.voucher_store import VoucherStore, get_voucher_store

CREATED_AT = datetime(2024, 1, 1, tzinfo=UTC)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest.fixture()
def make_product():
    """Build products with sensible defaults."""

    def _make(product_id: str, **overrides) -> Product:
        fields = {
            "id": product_id,
            "name": f"Product {product_id}",
            "description": "",
            "price": 10.0,
            "stock": 10,
            "created_at": CREATED_AT,
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture()
def make_review():
    def _make(product_id: str, rating: int) -> RatingEvent:
        return RatingEvent(product_id=product_id, rating=rating, created_at=CREATED_AT)

    return _make


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client wired into every store dependency."""
    from src.main import app

    client = fakeredis.FakeRedis()
    app.dependency_overrides[get_catalog_store] = lambda: CatalogStore(client)
    app.dependency_overrides[get_review_store] = lambda: ReviewStore(
        client, ReviewChangePublisher(client, "reviews:changes")
    )
    app.dependency_overrides[get_voucher_store] = lambda: VoucherStore(client)
    app.dependency_overrides[get_ratings_store] = lambda: RatingsStore(client)
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()
        app.dependency_overrides.pop(get_catalog_store, None)
        app.dependency_overrides.pop(get_review_store, None)
        app.dependency_overrides.pop(get_voucher_store, None)
        app.dependency_overrides.pop(get_ratings_store, None)


@pytest_asyncio.fixture()
async def client(redis_client):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from src.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client
