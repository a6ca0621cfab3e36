"""Server Entry-point: exit status on failed startup and signal-driven shutdown.

Invariants:
    - A store that cannot be initialized makes serve() return 1, even when
      uvicorn itself raises SystemExit from startup()
    - SIGINT, SIGTERM and SIGUSR2 all move the lifecycle to DRAINING
    - A termination signal received before the lifespan runs skips store init
"""

import asyncio
import os
import signal

import pytest
import uvicorn

from app.config import Settings
from app.core.errors import StoreUnavailableError
from app.core.lifecycle import LifecycleController, LifecycleState
from app.infrastructure.store import TodoStore
from app.main import create_app
from app.server import (
    STARTUP_FAILURE_EXIT_CODE, TodoServer, _install_reload_signal, serve,
)


class _UnreachableStore(TodoStore):
    async def init(self) -> None:
        raise StoreUnavailableError("connection refused")


class _CountingStore(TodoStore):
    def __init__(self):
        super().__init__("sqlite+aiosqlite:///:memory:")
        self.init_calls = 0

    async def init(self) -> None:
        self.init_calls += 1


@pytest.fixture
def server_settings(tmp_path):
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        static_dir=str(tmp_path / "none"),
        port=0,
        log_format="text",
    )


@pytest.fixture
def base_exit_calls(monkeypatch):
    """Replace uvicorn's own exit handling so no real signal is re-raised."""
    calls: list[int] = []
    monkeypatch.setattr(
        uvicorn.Server, "handle_exit",
        lambda self, sig, frame: calls.append(sig),
    )
    return calls


async def test_serve_returns_failure_code_when_store_unreachable(server_settings):
    app = create_app(
        settings=server_settings,
        store=_UnreachableStore(server_settings.database_url_resolved),
    )

    exit_code = await serve(app, server_settings)

    assert exit_code == STARTUP_FAILURE_EXIT_CODE
    assert app.state.lifecycle.state is LifecycleState.STOPPED


async def test_serve_maps_uvicorn_system_exit_to_failure_code(
    server_settings, monkeypatch,
):
    app = create_app(
        settings=server_settings,
        store=_UnreachableStore(server_settings.database_url_resolved),
    )

    async def _exiting_serve(self, sockets=None):
        self.lifecycle.mark_startup_failed()
        raise SystemExit(3)

    monkeypatch.setattr(TodoServer, "serve", _exiting_serve)

    assert await serve(app, server_settings) == STARTUP_FAILURE_EXIT_CODE


@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
def test_termination_signals_request_shutdown(sig, base_exit_calls):
    lifecycle = LifecycleController()
    lifecycle.mark_listening()
    server = TodoServer(uvicorn.Config(create_app()), lifecycle)

    server.handle_exit(sig, None)

    assert lifecycle.state is LifecycleState.DRAINING
    assert server.should_exit is True
    assert base_exit_calls == [sig]


async def test_sigterm_before_lifespan_skips_store_init(
    server_settings, base_exit_calls,
):
    store = _CountingStore()
    app = create_app(settings=server_settings, store=store)
    server = TodoServer(uvicorn.Config(app), app.state.lifecycle)

    server.handle_exit(signal.SIGTERM, None)
    async with app.router.lifespan_context(app):
        pass

    assert store.init_calls == 0
    assert app.state.lifecycle.state is LifecycleState.STOPPED
    assert not app.state.lifecycle.startup_failed


@pytest.mark.skipif(not hasattr(signal, "SIGUSR2"), reason="POSIX only")
async def test_sigusr2_requests_shutdown():
    lifecycle = LifecycleController()
    lifecycle.mark_listening()
    server = TodoServer(uvicorn.Config(create_app()), lifecycle)
    _install_reload_signal(server)
    try:
        os.kill(os.getpid(), signal.SIGUSR2)
        for _ in range(50):
            if server.should_exit:
                break
            await asyncio.sleep(0.01)
    finally:
        asyncio.get_running_loop().remove_signal_handler(signal.SIGUSR2)

    assert server.should_exit is True
    assert lifecycle.state is LifecycleState.DRAINING
