"""API test fixtures — app over an in-memory store + httpx ASGI client.

Invariants:
    - Every test gets a fresh store (make_data) behind a MemoryAdapter
    - Lifespan is not run: the Database is passed to create_app directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from docstore.config import Settings
from docstore.main import create_app


@pytest.fixture
def settings():
    return Settings(cors_origins=["http://localhost:5173"], static_dirs=[])


@pytest.fixture
def app(db, settings):
    return create_app(db, settings)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
