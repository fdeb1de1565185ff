"""Database engine management."""

import ssl
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.rosterhub.core.config import get_settings

_engine: AsyncEngine | None = None


def build_ssl_context(ssl_mode: str) -> ssl.SSLContext | None:
    """Map a libpq-style sslmode onto an SSLContext for asyncpg."""
    if ssl_mode == "disable":
        return None
    context = ssl.create_default_context()
    if ssl_mode in ("verify-ca", "verify-full"):
        context.check_hostname = ssl_mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    else:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool and driver options for the configured backend.

    PostgreSQL gets a sized pool and asyncpg arguments; other backends
    (SQLite in tests) are created with SQLAlchemy defaults.
    """
    settings = get_settings()
    if make_url(database_url).get_backend_name() != "postgresql":
        return {}

    connect_args: dict[str, Any] = {
        "statement_cache_size": settings.database_statement_cache_size,
    }
    ssl_context = build_ssl_context(settings.database_ssl_mode)
    if ssl_context is not None:
        connect_args["ssl"] = ssl_context

    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "connect_args": connect_args,
    }


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        _engine = create_async_engine(
            database_url, pool_pre_ping=True, **engine_options(database_url)
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
