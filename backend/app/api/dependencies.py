"""FastAPI dependencies resolving per-app resources from app.state."""

from fastapi import Request

from app.config import Settings
from app.infrastructure.metrics import ApiMetrics
from app.infrastructure.store import TodoStore


def get_store(request: Request) -> TodoStore:
    return request.app.state.store


def get_metrics(request: Request) -> ApiMetrics:
    return request.app.state.metrics


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
