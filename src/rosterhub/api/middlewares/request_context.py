"""Per-request log context and in-flight tracking for graceful shutdown."""

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.rosterhub.core.logging import bind_request_context, clear_request_context
from src.rosterhub.core.shutdown import request_tracker

# Probes must keep answering while the process drains.
UNTRACKED_PATHS = frozenset({"/health", "/metrics"})


async def request_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind request_id for every log line; auth dependencies add user and organization."""
    clear_request_context()
    bind_request_context(correlation_id.get())
    try:
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)
        async with request_tracker.track_request():
            return await call_next(request)
    finally:
        clear_request_context()
