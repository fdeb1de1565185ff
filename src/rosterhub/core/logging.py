"""Logging configuration using structlog.

Every line carries whatever request, user and organization context has been
bound for the current task, so an invite acceptance or organization deletion
can be followed end to end by ``request_id`` or ``organization_id``.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "temporalio": logging.INFO,
    "stripe": logging.WARNING,
    "httpx": logging.WARNING,
}


def _renderer(debug: bool) -> list[structlog.typing.Processor]:
    if debug:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(debug: bool = False) -> None:
    """Configure structlog once per process (API or worker).

    Args:
        debug: Coloured console output when True, JSON lines otherwise.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(debug),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: UUID, email: str | None = None) -> None:
    """Bind the authenticated user. Email is only bound when LOG_USER_EMAILS is set."""
    from src.rosterhub.core.config import get_settings

    bind_contextvars(user_id=str(user_id))
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def bind_organization_context(organization_id: UUID) -> None:
    bind_contextvars(organization_id=str(organization_id))


def clear_request_context() -> None:
    clear_contextvars()
