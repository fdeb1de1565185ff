"""Health probe and Prometheus metrics endpoints."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.db import get_session
from src.rosterhub.core.shutdown import request_tracker
from src.rosterhub.temporal.client import get_temporal_client


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health")
    async def health() -> JSONResponse:
        """Report database and Temporal reachability.

        Temporal being unreachable degrades the service (deletions are delayed)
        but does not take it out of rotation.
        """
        if request_tracker.is_shutting_down:
            return JSONResponse(
                content={
                    "status": "draining",
                    "in_flight_requests": request_tracker.in_flight_count,
                },
                status_code=503,
            )

        result: dict[str, Any] = {
            "status": "healthy",
            "database": "unknown",
            "temporal": "unknown",
        }

        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            result["database"] = "healthy"
        except (SQLAlchemyError, OSError) as e:
            result["database"] = f"unhealthy: {e!s}"
            result["status"] = "unhealthy"

        try:
            await get_temporal_client()
            result["temporal"] = "healthy"
        except (RuntimeError, OSError) as e:
            result["temporal"] = f"unhealthy: {e!s}"
            if result["status"] == "healthy":
                result["status"] = "degraded"

        status_code = 503 if result["status"] == "unhealthy" else 200
        return JSONResponse(content=result, status_code=status_code)


def setup_metrics(app: FastAPI) -> None:
    """Expose /metrics, guarded by X-Metrics-Key when METRICS_API_KEY is set."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
        expected = settings.metrics_api_key
        if api_key is None or expected is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
