"""
Feature Flag Service
Main application entry point
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from flag_service.api.routes import flags, health, metrics
from flag_service.config import Settings
from flag_service.core.models import ErrorResponse, validation_errors
from flag_service.feature_flags.store import FlagStore, InMemoryFlagStore
from flag_service.middleware.metrics import MetricsCollector, MetricsMiddleware
from flag_service.utils.logger import setup_logging

logger = logging.getLogger("flag_service")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager"""
    logger.debug(
        "Flag store ready",
        extra={"event": "startup"},
    )
    yield
    tracer_provider = getattr(app.state, "tracer_provider", None)
    if tracer_provider is not None:
        tracer_provider.shutdown()
    logger.debug("Flag service stopped", extra={"event": "shutdown"})


def create_app(
    store: Optional[FlagStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure FastAPI application"""

    settings = settings or Settings()

    app = FastAPI(
        title="Feature Flag Service",
        description="In-memory boolean feature flags over HTTP",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan
    )

    # One store per application; handlers reach it through app.state
    app.state.flag_store = store if store is not None else InMemoryFlagStore()
    app.state.settings = settings
    app.state.tracer_provider = None

    if settings.metrics.enabled:
        app.add_middleware(MetricsMiddleware, access_log=settings.logging.access_log)

    app.include_router(flags.router, tags=["flags"])
    app.include_router(health.router, prefix="/health", tags=["health"])
    if settings.metrics.enabled:
        app.include_router(metrics.router, prefix="/metrics", tags=["metrics"])

    if settings.tracing.enabled:
        setup_tracing(app, settings)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            f"Malformed request on {request.url.path}",
            extra={"path": request.url.path, "event": "decode_failure"}
        )
        MetricsCollector.record_decode_failure(request.url.path)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Malformed request",
                detail=validation_errors(exc.errors())
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        # Exception text stays in the log only when running in production
        detail = None if settings.is_production() else str(exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", detail=detail).model_dump()
        )

    return app


def setup_tracing(
    app: FastAPI,
    settings: Settings,
    exporter: Optional[SpanExporter] = None,
) -> TracerProvider:
    """Setup distributed tracing"""

    tracer_provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.tracing.service_name})
    )

    if exporter is None:
        exporter = OTLPSpanExporter(endpoint=settings.tracing.otlp_endpoint)

    tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider)
    app.state.tracer_provider = tracer_provider

    logger.debug("Distributed tracing configured", extra={"event": "tracing_configured"})
    return tracer_provider


async def main():
    """Main application entry point"""
    settings = Settings()

    setup_logging(
        level=settings.logging.level,
        format_type=settings.logging.format,
        log_file=settings.logging.log_file,
    )

    app = create_app(settings=settings)

    # A single worker: the flag store lives in this process only.
    # Logging stays as configured above; access lines come from MetricsMiddleware.
    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        access_log=False,
        timeout_keep_alive=settings.server.keepalive_timeout,
        log_config=None,
    )

    server = uvicorn.Server(config)

    logger.info(f"Starting server on {settings.server.host}:{settings.server.port}")

    try:
        await server.serve()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise


def run():
    """Console script entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
