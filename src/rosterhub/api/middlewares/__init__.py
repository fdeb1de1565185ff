"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from src.rosterhub.core.config import Settings
from src.rosterhub.core.security import SecurityHeadersMiddleware

from .request_context import request_context_middleware

__all__ = [
    "request_context_middleware",
    "setup_middlewares",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Configure all application middlewares.

    Starlette runs the last-added middleware first: CorrelationIdMiddleware
    wraps everything, so the request context middleware sees the request id.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "Stripe-Signature", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.app_env == "production")
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_context_middleware)
    app.add_middleware(CorrelationIdMiddleware)
