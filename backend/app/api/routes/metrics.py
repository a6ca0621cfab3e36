"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response

from app.api.dependencies import get_metrics
from app.infrastructure.metrics import ApiMetrics

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=Response)
async def export_metrics(metrics: ApiMetrics = Depends(get_metrics)):
    """Render every registered collector in the text exposition format."""
    return Response(content=metrics.render(), media_type=metrics.content_type)
