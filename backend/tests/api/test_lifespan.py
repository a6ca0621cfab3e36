"""Lifespan: store init/teardown driven through the FastAPI lifespan.

Invariants:
    - Successful init → LISTENING; exit → teardown → STOPPED
    - Failed init raises StoreUnavailableError and ends STOPPED without LISTENING
    - Shutdown requested before startup skips store init
"""

import pytest

from app.config import Settings
from app.core.errors import StoreUnavailableError
from app.core.lifecycle import LifecycleState
from app.infrastructure.store import TodoStore
from app.main import create_app


class _RecordingStore(TodoStore):
    """TodoStore that records lifecycle calls and can be told to fail."""

    def __init__(self, fail_init: bool = False):
        super().__init__("sqlite+aiosqlite:///:memory:")
        self.fail_init = fail_init
        self.calls: list[str] = []

    async def init(self) -> None:
        self.calls.append("init")
        if self.fail_init:
            raise StoreUnavailableError("connection refused")

    async def teardown(self) -> None:
        self.calls.append("teardown")


@pytest.fixture
def lifespan_settings(tmp_path):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        static_dir=str(tmp_path / "none"),
        log_format="text",
    )


async def test_successful_startup_and_shutdown(lifespan_settings):
    store = _RecordingStore()
    app = create_app(settings=lifespan_settings, store=store)
    lifecycle = app.state.lifecycle

    async with app.router.lifespan_context(app):
        assert lifecycle.state is LifecycleState.LISTENING

    assert lifecycle.state is LifecycleState.STOPPED
    assert store.calls == ["init", "teardown"]


async def test_failed_init_aborts_startup(lifespan_settings):
    store = _RecordingStore(fail_init=True)
    app = create_app(settings=lifespan_settings, store=store)
    lifecycle = app.state.lifecycle

    with pytest.raises(StoreUnavailableError):
        async with app.router.lifespan_context(app):
            pytest.fail("lifespan body must not run")

    assert lifecycle.state is LifecycleState.STOPPED
    assert lifecycle.startup_failed
    assert store.calls == ["init"]


async def test_shutdown_before_startup_skips_init(lifespan_settings):
    store = _RecordingStore()
    app = create_app(settings=lifespan_settings, store=store)
    app.state.lifecycle.request_shutdown()

    async with app.router.lifespan_context(app):
        assert app.state.lifecycle.state is LifecycleState.DRAINING

    assert store.calls == ["teardown"]
    assert app.state.lifecycle.state is LifecycleState.STOPPED


async def test_real_store_round_trip_through_lifespan(tmp_path):
    settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'todo.db'}",
        static_dir=str(tmp_path / "none"),
        database_wait_timeout_seconds=0,
        log_format="text",
    )
    app = create_app(settings=settings)

    async with app.router.lifespan_context(app):
        result = await app.state.store.add_item("persisted")
        assert result.value["description"] == "persisted"

    assert (tmp_path / "nested" / "todo.db").exists()
    assert app.state.store.engine is None
