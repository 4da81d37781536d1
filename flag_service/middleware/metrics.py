"""
Metrics Collection Middleware for the Feature Flag Service
"""

import logging
import time
import uuid

from fastapi import Request
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware

from flag_service.utils.logger import log_request_end

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    'flag_service_requests_total',
    'Total number of requests',
    ['method', 'endpoint', 'status_code']
)

REQUEST_DURATION = Histogram(
    'flag_service_request_duration_seconds',
    'Request duration in seconds',
    ['method', 'endpoint']
)

ACTIVE_REQUESTS = Gauge(
    'flag_service_active_requests',
    'Number of active requests',
    ['endpoint']
)

FLAG_OPERATIONS = Counter(
    'flag_service_flag_operations_total',
    'Flag store operations',
    ['operation', 'result']
)

DECODE_FAILURES = Counter(
    'flag_service_decode_failures_total',
    'Requests rejected because the body could not be decoded',
    ['endpoint']
)

ERROR_COUNT = Counter(
    'flag_service_errors_total',
    'Total number of errors',
    ['error_type', 'endpoint']
)


def endpoint_label(path: str) -> str:
    """Get normalized endpoint label"""

    if path in ("/get", "/set"):
        return path
    elif path.startswith("/health"):
        return "/health"
    elif path.startswith("/metrics"):
        return "/metrics"
    else:
        return "other"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Metrics collection middleware"""

    def __init__(self, app, access_log: bool = False):
        super().__init__(app)
        self.access_log = access_log

    async def dispatch(self, request: Request, call_next):
        """Collect metrics for each request"""

        start_time = time.time()
        endpoint = endpoint_label(request.url.path)
        method = request.method

        ACTIVE_REQUESTS.labels(endpoint=endpoint).inc()

        try:
            response = await call_next(request)

            duration = time.time() - start_time

            REQUEST_COUNT.labels(
                method=method,
                endpoint=endpoint,
                status_code=response.status_code
            ).inc()

            REQUEST_DURATION.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

            response.headers["X-Response-Time"] = f"{duration:.3f}s"

            if self.access_log:
                log_request_end(
                    logger,
                    request.headers.get("X-Request-ID", str(uuid.uuid4())),
                    method,
                    request.url.path,
                    response.status_code,
                    int(duration * 1000),
                )

            return response

        except Exception as e:
            # The exception handler answers 500 further out
            REQUEST_COUNT.labels(
                method=method,
                endpoint=endpoint,
                status_code=500
            ).inc()

            REQUEST_DURATION.labels(
                method=method,
                endpoint=endpoint
            ).observe(time.time() - start_time)

            ERROR_COUNT.labels(
                error_type=type(e).__name__,
                endpoint=endpoint
            ).inc()

            raise

        finally:
            ACTIVE_REQUESTS.labels(endpoint=endpoint).dec()


class MetricsCollector:
    """Additional metrics collection utilities"""

    @staticmethod
    def record_flag_read(value: bool):
        """Record a flag read and the value it returned"""
        FLAG_OPERATIONS.labels(operation="get", result=str(value).lower()).inc()

    @staticmethod
    def record_flag_write():
        """Record a committed flag write"""
        FLAG_OPERATIONS.labels(operation="set", result="set").inc()

    @staticmethod
    def record_decode_failure(endpoint: str):
        """Record a rejected request body"""
        DECODE_FAILURES.labels(endpoint=endpoint_label(endpoint)).inc()


def get_metrics() -> bytes:
    """Get Prometheus metrics"""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get metrics content type"""
    return CONTENT_TYPE_LATEST
