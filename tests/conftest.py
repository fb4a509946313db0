"""
Pytest configuration and shared fixtures for Edge Router tests.
"""
import pytest
import pytest_asyncio
import tempfile
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport

from edge_router.models import RoutingConfig


@pytest.fixture
def temp_db_path():
    """Provide a temporary database path for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    if os.path.exists(db_path):
        os.remove(db_path)


@pytest.fixture
def base_config() -> RoutingConfig:
    """The smallest usable config: one active build, used as default."""
    return RoutingConfig(default="0.1.0-27", active_versions=["0.1.0-27"])


@pytest.fixture
def make_store():
    """Build a mock config store whose get_config() returns the given config."""
    def _make(config=None, error=None):
        store = MagicMock()
        store.get_config = AsyncMock(return_value=config, side_effect=error)
        return store
    return _make


@pytest_asyncio.fixture
async def test_app():
    """Provide a test FastAPI app instance."""
    # Import here so settings/logging are only initialized when needed
    from edge_router.main import app
    return app


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="https://example.com"
    ) as client:
        yield client
