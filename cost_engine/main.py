"""
LLM Cost Engine API
===================
FastAPI application entry point.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app
from starlette.concurrency import run_in_threadpool

from cost_engine import __version__
from cost_engine.api import api_router
from cost_engine.config import settings
from cost_engine.services.pricing import PricingService, default_service


def configure_logging() -> None:
    """Configure structured logging."""
    logging.basicConfig(format="%(message)s", level=settings.log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger()


def create_app(service: Optional[PricingService] = None) -> FastAPI:
    """
    Create the API application.

    Args:
        service: Pricing service to serve; the process-wide default service
            is used when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        logger.info("Starting LLM Cost Engine", env=settings.app_env)
        pricing_service = service or await run_in_threadpool(default_service)
        pricing_service.publish_metrics()
        app.state.pricing_service = pricing_service
        logger.info("Pricing table loaded", models=len(pricing_service.table))

        yield

        # Shutdown
        logger.info("Shutting down LLM Cost Engine")
        pricing_service.stop_periodic_update()

    app = FastAPI(
        title="LLM Cost Engine API",
        description="Usage-based USD cost calculation for LLM API calls",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # Mount Prometheus metrics endpoint
    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())

    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "cost_engine.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
