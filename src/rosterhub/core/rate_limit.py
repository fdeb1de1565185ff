"""Endpoint rate limiting (slowapi).

Limits are keyed by client IP and stored in process memory. The public
invite-acceptance endpoint is the only rate-limited route.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.logging import get_logger

logger = get_logger(__name__)


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """Client IP, honouring X-Forwarded-For only from a trusted proxy.

    The first X-Forwarded-For entry is the original client. From any other
    peer the header is ignored, since a caller could rotate it to get a fresh
    bucket per request.
    """
    trusted = get_settings().trusted_proxy_ips
    if forwarded_for and client_host in trusted:
        return forwarded_for.split(",")[0].strip() or client_host
    return client_host


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key: client IP only, never body fields such as the invite code."""
    client_ip = get_client_ip(
        request.headers.get("x-forwarded-for"), get_remote_address(request)
    )
    return client_ip or "unknown"


def create_limiter() -> Limiter:
    """Create the limiter. Disabled in the testing environment."""
    settings = get_settings()
    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; changes need a restart.
limiter = create_limiter()
