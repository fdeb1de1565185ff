"""Tests for worker wiring: task queues and the health endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.rosterhub.core.config import get_settings
from src.rosterhub.temporal.worker import (
    create_health_app,
    jobs_task_queue,
    organization_task_queues,
)

pytestmark = pytest.mark.unit


def test_one_organization_queue_per_shard():
    settings = get_settings()
    queues = organization_task_queues()

    assert len(queues) == settings.temporal_queue_shards
    assert len(set(queues)) == len(queues)
    assert jobs_task_queue() not in queues


@pytest.mark.asyncio
async def test_health_endpoint_reports_workload():
    app = create_health_app("organization", ["rosterhub-organization-0"])

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://worker") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "temporal-worker",
        "workload": "organization",
        "task_queues": ["rosterhub-organization-0"],
    }
