"""CLI entry-point: run the todo API under uvicorn with graceful shutdown.

Invariants:
    - SIGINT, SIGTERM and SIGUSR2 all go through TodoServer.request_exit:
      the lifecycle enters DRAINING before uvicorn is told to stop, so a
      signal that lands before the lifespan runs also skips store init
    - Exit status is 1 when the store could not be initialized, 0 otherwise,
      whatever status uvicorn itself would exit with
"""

import asyncio
import logging
import signal
import sys
from types import FrameType

import uvicorn
from fastapi import FastAPI

from app.config import Settings, get_settings
from app.core.lifecycle import LifecycleController
from app.infrastructure.observability import setup_logging
from app.main import app

logger = logging.getLogger(__name__)

STARTUP_FAILURE_EXIT_CODE = 1


class TodoServer(uvicorn.Server):
    """uvicorn server that reports termination signals to the lifecycle."""

    def __init__(self, config: uvicorn.Config, lifecycle: LifecycleController):
        super().__init__(config)
        self.lifecycle = lifecycle

    def request_exit(self, sig: int) -> None:
        if self.lifecycle.request_shutdown():
            logger.info(f"Received {signal.Signals(sig).name}, shutting down")
        self.should_exit = True

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        self.request_exit(sig)
        super().handle_exit(sig, frame)


def _install_reload_signal(server: TodoServer) -> None:
    """Route SIGUSR2 (sent by auto-reload supervisors) to request_exit."""
    reload_signal = getattr(signal, "SIGUSR2", None)
    if reload_signal is None:  # pragma: no cover - platform specific
        return
    try:
        asyncio.get_running_loop().add_signal_handler(
            reload_signal, server.request_exit, reload_signal,
        )
    except NotImplementedError:  # pragma: no cover - platform specific
        logger.warning("Signal handlers not supported on this event loop")


async def serve(app: FastAPI, settings: Settings) -> int:
    """Run until a termination signal; return the process exit status."""
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
        log_level=settings.log_level.lower(),
        access_log=False,
        timeout_graceful_shutdown=2,
    )
    lifecycle: LifecycleController = app.state.lifecycle
    server = TodoServer(config, lifecycle)
    _install_reload_signal(server)

    try:
        await server.serve()
    except SystemExit as e:
        # uvicorn exits from startup() when the lifespan fails
        logger.debug(f"uvicorn exited with status {e.code}")

    if lifecycle.startup_failed or not server.started:
        logger.error("Startup failed, exiting")
        return STARTUP_FAILURE_EXIT_CODE
    return 0


def main() -> None:
    """Run the ASGI application using uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    sys.exit(asyncio.run(serve(app, settings)))


if __name__ == "__main__":
    main()
