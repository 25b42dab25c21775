"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_ops.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_ops.api.dependencies import get_request_id
from loan_ops.api.v1 import applications, debts, statistics, status
from loan_ops.domain.exceptions import (
    ApplicationNotFoundError,
    BackendAPIError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidRangeError,
    UnsupportedDimensionError,
)
from loan_ops.infrastructure.observability.logging import setup_logging
from loan_ops.infrastructure.observability.metrics import backend_fetch_failures_counter
from loan_ops.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.warning(f"Invalid query: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: ApplicationNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def backend_error_handler(request: Request, exc: BackendAPIError) -> JSONResponse:
    backend_fetch_failures_counter.inc()
    logging.error(f"Backend API error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=503, content={"detail": "Backend service unavailable"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Loan Ops Engine",
        description="Application classification, filtering, debt and statistics service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    for exc_class in (InvalidRangeError, InvalidAmountError, InvalidCategoryError, UnsupportedDimensionError):
        app.add_exception_handler(exc_class, invalid_input_handler)
    app.add_exception_handler(ApplicationNotFoundError, not_found_handler)
    app.add_exception_handler(BackendAPIError, backend_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(status.router, prefix="/v1", tags=["status"])
    app.include_router(applications.router, prefix="/v1", tags=["applications"])
    app.include_router(statistics.router, prefix="/v1", tags=["statistics"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])

    return app


app = create_app()
