"""Root conftest for API tests.

Provides:
- DesignStorage rooted in a per-test temporary directory
- Async HTTP client bound to the FastAPI app with storage overridden
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from figma2html.storage import DesignStorage


@pytest.fixture
def storage(tmp_path) -> DesignStorage:
    return DesignStorage(tmp_path / "output")


@pytest_asyncio.fixture
async def client(storage: DesignStorage) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI routes."""
    from app.dependencies import get_storage
    from app.main import app

    app.dependency_overrides[get_storage] = lambda: storage
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
