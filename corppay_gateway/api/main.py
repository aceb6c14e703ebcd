"""FastAPI application factory"""

import logging
from typing import Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from corppay_gateway.api.dependencies import build_settlement_service
from corppay_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from corppay_gateway.api.responses import ResponseBuilder, TransportError
from corppay_gateway.api.v1 import accounts, payments
from corppay_gateway.config import Settings, settings
from corppay_gateway.domain.models import AccountSnapshot, Credential
from corppay_gateway.infrastructure.observability.logging import setup_logging
from corppay_gateway.infrastructure.observability.metrics import transport_error_counter

# Setup structured logging
setup_logging(settings.log_level)


def create_app(
    app_settings: Optional[Settings] = None,
    credentials: Optional[Iterable[Credential]] = None,
    accounts_seed: Optional[Iterable[AccountSnapshot]] = None,
) -> FastAPI:
    """Create and configure FastAPI application"""
    app_settings = app_settings or settings
    app = FastAPI(
        title="Corporate Payments Gateway",
        description="Mock settlement of corporate single payments, account listing and status inquiry",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = app_settings
    app.state.settlement_service = build_settlement_service(app_settings, credentials, accounts_seed)
    app.state.response_builder = ResponseBuilder(app_settings.signature_value)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
        """Render errors that never reached the domain pipeline"""
        transport_error_counter.labels(http_code=str(exc.status_code)).inc()
        logging.warning(
            f"Transport error {exc.status_code}: {exc.message}",
            extra={"request_id": getattr(request.state, "request_id", "unknown"), "path": request.url.path},
        )
        return app.state.response_builder.transport_error(exc)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])

    return app


app = create_app()
