"""
Health Check API Routes for the Feature Flag Service
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from flag_service.core.models import ComponentHealth, DetailedHealthStatus, HealthStatus
from flag_service.feature_flags.store import FlagStore

logger = logging.getLogger(__name__)

router = APIRouter()

# Service start time for uptime calculation
SERVICE_START_TIME = time.time()

# Key read by the detailed check; never written by the service itself
PROBE_KEY = "__health_probe__"


@router.get("/", response_model=HealthStatus)
async def health_check():
    """Basic health check"""

    uptime = int(time.time() - SERVICE_START_TIME)

    return HealthStatus(
        status="healthy",
        uptime_seconds=uptime
    )


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check for Kubernetes"""

    if getattr(request.app.state, "flag_store", None) is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "missing_service": "flag_store"}
        )

    return {"status": "ready"}


@router.get("/live")
async def liveness_check():
    """Liveness check for Kubernetes"""
    return {"status": "alive", "timestamp": int(time.time())}


@router.get("/detailed")
async def detailed_health_check(request: Request):
    """Detailed health check with component status"""

    health_data = DetailedHealthStatus(
        status="healthy",
        uptime_seconds=int(time.time() - SERVICE_START_TIME),
    )

    store = getattr(request.app.state, "flag_store", None)
    if store is None:
        health_data.components["flag_store"] = ComponentHealth(status="missing")
    else:
        health_data.components["flag_store"] = await _check_flag_store_health(store)

    healthy = health_data.components["flag_store"].status == "healthy"
    if not healthy:
        health_data.status = "degraded"

    return JSONResponse(
        status_code=200 if healthy else 503,
        content=health_data.model_dump(exclude_none=True)
    )


async def _check_flag_store_health(store: FlagStore) -> ComponentHealth:
    """Check flag store health with a probe read"""

    try:
        await store.get_flag(PROBE_KEY)
        return ComponentHealth(status="healthy", backend=type(store).__name__)

    except Exception as e:
        logger.error(f"Flag store health check failed: {e}")
        return ComponentHealth(
            status="unhealthy",
            backend=type(store).__name__,
            error=str(e)
        )
