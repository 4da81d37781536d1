"""
Pytest configuration and fixtures for Feature Flag Service tests
"""

import os

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["METRICS_ENABLED"] = "true"
os.environ["TRACING_ENABLED"] = "false"
os.environ["DEBUG"] = "false"


@pytest.fixture
def flag_store():
    """Empty in-memory flag store"""
    from flag_service.feature_flags.store import InMemoryFlagStore
    return InMemoryFlagStore()


@pytest.fixture
def app(flag_store):
    """FastAPI app wired to the ``flag_store`` fixture"""
    from flag_service.main import create_app
    return create_app(store=flag_store)


@pytest.fixture
def client(app):
    """Test client for FastAPI app"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(app):
    """Async test client for FastAPI app"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
