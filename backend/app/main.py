"""Todo API: FastAPI application factory and lifespan.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - The metrics middleware runs before routing, so every /api request is counted
    - Store init() completes before the app reports LISTENING; a failed init aborts startup
    - Shutdown always runs teardown() and ends in STOPPED, whatever teardown does
    - Static files mounted last so /api, /metrics and /health take precedence

Design Decisions:
    - create_app() receives settings, store and metrics explicitly; `app` is the default wiring
    - Lifespan over @app.on_event for startup/shutdown
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.error_handlers import register_error_handlers
from app.api.routes import greeting, health, items, metrics as metrics_routes
from app.config import Settings, get_settings
from app.core.errors import StoreUnavailableError
from app.core.lifecycle import LifecycleController
from app.infrastructure.metrics import ApiMetrics, register_metrics_middleware
from app.infrastructure.observability import setup_logging
from app.infrastructure.store import TodoStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """STARTING → LISTENING on entry, DRAINING → STOPPED on exit."""
    settings: Settings = app.state.settings
    lifecycle: LifecycleController = app.state.lifecycle
    store: TodoStore = app.state.store
    setup_logging(settings.log_level, settings.log_format)

    if lifecycle.shutdown_requested:
        logger.warning("Shutdown requested before startup, skipping store init")
    else:
        try:
            await store.init()
        except StoreUnavailableError as e:
            logger.error(
                f"Store initialization failed: {e}",
                extra={"error_code": e.code},
            )
            lifecycle.mark_startup_failed()
            raise

    if not lifecycle.shutdown_requested:
        lifecycle.mark_listening()
        logger.info(f"Listening on port {settings.port}")
    try:
        yield
    finally:
        lifecycle.request_shutdown()
        await store.teardown()
        lifecycle.mark_stopped()


def create_app(
    settings: Settings | None = None,
    store: TodoStore | None = None,
    metrics: ApiMetrics | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        store = TodoStore(
            settings.database_url_resolved,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            wait_timeout=settings.database_wait_timeout_seconds,
        )
    metrics = metrics or ApiMetrics()

    app = FastAPI(title="Todo API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.metrics = metrics
    app.state.lifecycle = LifecycleController()

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_metrics_middleware(app, metrics, settings.api_prefix)
    register_error_handlers(app)

    app.include_router(metrics_routes.router)
    app.include_router(health.router)
    app.include_router(greeting.router, prefix=settings.api_prefix)
    app.include_router(items.router, prefix=settings.api_prefix)

    if os.path.isdir(settings.static_dir):
        app.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True),
            name="static",
        )
    return app


app = create_app()
