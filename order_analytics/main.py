"""
FastAPI Application

Main entry point for the Order Analytics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from order_analytics.config import get_settings
from order_analytics.config.logging import configure_logging
from order_analytics.database.connection import init_database, close_database
from order_analytics.serving.api.middleware import (
    RequestLoggingMiddleware,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from order_analytics.serving.api.routes import health_router, orders_router
from order_analytics.serving.tools import tool_schema

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Order Analytics API")

    try:
        await init_database()
        logger.info("Database initialized")
    except Exception as e:
        # Readiness probe reports the outage; keep serving liveness
        logger.warning("Database init failed", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_database()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Order Analytics API",
        description="Windowed order and transaction reporting",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.security.rate_limit_requests,
        window_seconds=settings.security.rate_limit_window_seconds,
    )

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(orders_router, prefix="/api/v1/accounts", tags=["Orders"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Order Analytics API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
            "tools": [tool_schema()],
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
