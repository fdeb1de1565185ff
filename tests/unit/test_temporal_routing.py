"""Tests for Temporal routing and task queue assignment."""

import pytest

from src.rosterhub.temporal.context import OrganizationCtx
from src.rosterhub.temporal.routing import (
    QueueKind,
    _stable_shard,
    route_for_organization,
    route_for_system_job,
    task_queue_name,
)
from src.rosterhub.temporal.workflows import deletion_workflow_id

pytestmark = pytest.mark.unit

ORG_ID = "550e8400-e29b-41d4-a716-446655440000"


class TestStableShard:
    def test_same_input_same_shard(self):
        assert _stable_shard(ORG_ID, 32) == _stable_shard(ORG_ID, 32)

    def test_different_inputs_distribute(self):
        shards = {_stable_shard(f"org-{i}", 32) for i in range(100)}
        assert len(shards) >= 20

    def test_single_shard_is_zero(self):
        assert _stable_shard("any-org", 1) == 0

    def test_zero_shards_treated_as_one(self):
        assert _stable_shard("any-org", 0) == 0

    def test_bounds(self):
        for i in range(100):
            assert 0 <= _stable_shard(f"org-{i}", 64) < 64


class TestQueueNames:
    def test_format(self):
        assert task_queue_name("rosterhub", QueueKind.ORGANIZATION, 3) == "rosterhub.organization.03"
        assert task_queue_name("rosterhub", QueueKind.JOBS, 0) == "rosterhub.jobs.00"

    def test_organization_route_is_stable(self):
        first = route_for_organization(
            organization_id=ORG_ID, namespace="default", prefix="rosterhub", shards=8
        )
        second = route_for_organization(
            organization_id=ORG_ID, namespace="default", prefix="rosterhub", shards=8
        )
        assert first == second
        assert first.task_queue.startswith("rosterhub.organization.")
        assert first.priority is not None
        assert first.priority.fairness_key == ORG_ID

    def test_system_job_route_uses_shard_zero(self):
        route = route_for_system_job(namespace="default", prefix="rosterhub")
        assert route.task_queue == "rosterhub.jobs.00"
        assert route.priority is None


def test_deletion_workflow_id_is_per_organization():
    assert deletion_workflow_id(ORG_ID) == f"organization-deletion-{ORG_ID}"
    assert deletion_workflow_id(ORG_ID) != deletion_workflow_id("other-org")


def test_organization_ctx_parses_uuid():
    ctx = OrganizationCtx(organization_id=ORG_ID)
    assert str(ctx.organization_uuid) == ORG_ID
