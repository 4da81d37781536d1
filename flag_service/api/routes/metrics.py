"""
Metrics API Routes for the Feature Flag Service
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from flag_service.middleware.metrics import get_metrics, get_metrics_content_type

router = APIRouter()


@router.get("/prometheus", response_class=PlainTextResponse)
async def prometheus_metrics():
    """Prometheus metrics endpoint"""

    metrics_data = get_metrics()
    return PlainTextResponse(
        content=metrics_data,
        media_type=get_metrics_content_type()
    )
