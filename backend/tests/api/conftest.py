"""Route test fixtures: per-test SQLite store + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Every test gets its own app, store and metrics registry (counters start at zero)
    - The store is initialized by the fixture; ASGITransport does not run the lifespan
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.infrastructure.metrics import ApiMetrics
from app.infrastructure.store import TodoStore
from app.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'todo.db'}",
        static_dir=str(tmp_path / "static"),
        log_format="text",
    )


@pytest.fixture
async def store(settings):
    store = TodoStore(settings.database_url_resolved, wait_timeout=0)
    await store.init()
    yield store
    await store.teardown()


@pytest.fixture
def metrics():
    return ApiMetrics()


@pytest.fixture
def test_app(settings, store, metrics):
    return create_app(settings=settings, store=store, metrics=metrics)


@pytest.fixture
async def client(test_app):
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def seed_item(store):
    """Insert one item through the store and return its payload."""
    result = await store.add_item("buy milk")
    return result.value
