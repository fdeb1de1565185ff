from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.rosterhub.api.middlewares import setup_middlewares
from src.rosterhub.api.v1.router import api_router
from src.rosterhub.core.config import get_settings
from src.rosterhub.core.db import dispose_engine
from src.rosterhub.core.exceptions import setup_exception_handlers
from src.rosterhub.core.health import setup_health_endpoint, setup_metrics
from src.rosterhub.core.logging import get_logger, setup_logging
from src.rosterhub.core.rate_limit import limiter
from src.rosterhub.core.shutdown import request_tracker
from src.rosterhub.temporal.client import reset_temporal_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    yield

    grace_period = settings.shutdown_grace_period
    request_tracker.start_shutdown()
    drained = await request_tracker.wait_for_drain(timeout=grace_period)
    if not drained:
        logger.warning(
            "Shutdown timeout, requests may not have completed",
            grace_period_seconds=grace_period,
            in_flight=request_tracker.in_flight_count,
        )

    reset_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "parent-invites", "description": "Parent invite administration and redemption"},
    {"name": "organizations", "description": "Subscription state and organization teardown"},
    {"name": "webhooks", "description": "Payment provider callbacks"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant organization management API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
