"""Health & Readiness Probes: liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 if the store is unreachable or the server is draining
    - Mounted outside the API prefix: probes are not counted as API requests
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_store
from app.core.lifecycle import LifecycleState
from app.infrastructure.store import TodoStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "todo-backend",
        "state": request.app.state.lifecycle.state.value,
    }


@router.get("/ready")
async def readiness_check(
    request: Request, store: TodoStore = Depends(get_store),
):
    """Readiness probe: includes database connectivity."""
    if request.app.state.lifecycle.state is not LifecycleState.LISTENING:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "not_listening"},
        )
    if not await store.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
