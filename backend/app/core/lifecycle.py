"""Server Lifecycle: explicit STARTING → LISTENING → DRAINING → STOPPED state machine.

Invariants:
    - State only moves forward along _TRANSITIONS; anything else raises LifecycleError
    - LISTENING is reachable only from STARTING (store init succeeded)
    - STOPPED is terminal; a failed startup goes STARTING → STOPPED directly
    - request_shutdown() is idempotent and safe to call from a signal callback

Design Decisions:
    - Pure state holder, no IO: the lifespan and the signal handlers drive it
"""

import logging
from enum import Enum

from app.core.errors import LifecycleError

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    STARTING = "starting"
    LISTENING = "listening"
    DRAINING = "draining"
    STOPPED = "stopped"


_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.STARTING: frozenset({
        LifecycleState.LISTENING, LifecycleState.DRAINING, LifecycleState.STOPPED,
    }),
    LifecycleState.LISTENING: frozenset({LifecycleState.DRAINING}),
    LifecycleState.DRAINING: frozenset({LifecycleState.STOPPED}),
    LifecycleState.STOPPED: frozenset(),
}


class LifecycleController:
    """Tracks where the process is between boot and exit."""

    def __init__(self) -> None:
        self._state = LifecycleState.STARTING
        self.startup_failed = False

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def shutdown_requested(self) -> bool:
        return self._state in (LifecycleState.DRAINING, LifecycleState.STOPPED)

    def _move(self, target: LifecycleState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise LifecycleError(self._state.value, target.value)
        logger.info(
            f"Lifecycle {self._state.value} -> {target.value}",
            extra={"state": target.value},
        )
        self._state = target

    def mark_listening(self) -> None:
        self._move(LifecycleState.LISTENING)

    def mark_startup_failed(self) -> None:
        self.startup_failed = True
        self._move(LifecycleState.STOPPED)

    def request_shutdown(self) -> bool:
        """Enter DRAINING. Returns False when already draining or stopped."""
        if self.shutdown_requested:
            return False
        self._move(LifecycleState.DRAINING)
        return True

    def mark_stopped(self) -> None:
        if self._state is LifecycleState.STOPPED:
            return
        if self._state is not LifecycleState.DRAINING:
            self.request_shutdown()
        self._move(LifecycleState.STOPPED)
