from __future__ import annotations

from fastapi import APIRouter, HTTPException

from exam_portal.config import get_settings
from exam_portal.observability.metrics import get_metrics


router = APIRouter(prefix="/api", tags=["metrics"])


@router.get("/metrics")
async def metrics() -> dict:
    settings = get_settings()
    if not settings.enable_metrics_endpoint:
        raise HTTPException(status_code=404, detail="Not found")
    return get_metrics().snapshot()
