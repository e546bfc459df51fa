"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wallet_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from wallet_gateway.api.v1 import accounts, history, reviews
from wallet_gateway.infrastructure.observability.logging import setup_logging
from wallet_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Wallet Gateway",
        description="Transaction validation and balance-impact confirmation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers (history before reviews so /reviews/history is not read as a review id)
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(reviews.router, prefix="/v1", tags=["reviews"])

    return app


app = create_app()
