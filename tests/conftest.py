"""Pytest configuration and fixtures for the catalog core."""

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis

from catalog.config import settings
from catalog.services.counter import RedisCounterService
from catalog.services.product_service import ProductService
from catalog.services.slug import RedisSlugService
from catalog.services.storage.product_store import ProductStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    client = fakeredis.FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()


@pytest.fixture
def product_store(redis_client):
    return ProductStore(
        redis_client,
        settings.PRODUCT_KEY_PREFIX,
        settings.COMBINATION_INDEX_KEY,
        max_retries=3,
    )


@pytest.fixture
def counter(redis_client):
    return RedisCounterService(redis_client, settings.COUNTER_KEY_PREFIX)


@pytest.fixture
def slug_service(redis_client):
    return RedisSlugService(redis_client, settings.SLUG_INDEX_KEY, max_attempts=5)


@pytest.fixture
def product_service(product_store, counter, slug_service):
    return ProductService(product_store, counter, slug_service)


@pytest.fixture
def product_document():
    """A minimal sellable product as sent by the catalog admin."""
    return {
        "name": "Son Môi Lì",
        "classification": "sellable_products",
        "brand": {"id": "brand-1", "name": "Hương Thảo"},
        "combinations": [
            {
                "my_sociolla_sql_id": 9001,
                "is_default": True,
                "price": 150000,
                "stock": 12,
                "attributes": {"shade": {"name": "Shade", "value": "Đỏ"}},
            },
            {"my_sociolla_sql_id": 9002, "price": 160000},
        ],
    }
