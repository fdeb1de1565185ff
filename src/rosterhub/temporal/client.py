"""Temporal client for starting workflows and managing schedules from the API."""

from temporalio.client import Client

from src.rosterhub.core.config import get_settings

_client: Client | None = None


async def get_temporal_client() -> Client:
    global _client
    if _client is None:
        settings = get_settings()
        _client = await Client.connect(
            settings.temporal_host,
            namespace=settings.temporal_namespace,
        )
    return _client


def reset_temporal_client() -> None:
    """Drop the cached client. Connections close with the process."""
    global _client
    _client = None
