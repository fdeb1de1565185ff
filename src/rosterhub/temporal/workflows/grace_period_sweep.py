"""
Grace-Period Sweep Workflow.

Runs on a schedule. Finds organizations whose canceled subscription is past
its grace period and starts one OrganizationDeletionWorkflow per
organization as an abandoned child, so the sweep finishes quickly while the
deletions run on the organization queues.
"""

from dataclasses import dataclass
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.workflow import ParentClosePolicy

with workflow.unsafe.imports_passed_through():
    from src.rosterhub.temporal.activities import (
        PendingDeletionOutput,
        list_organizations_pending_deletion,
    )
    from src.rosterhub.temporal.routing import QueueKind, route_for_organization
    from src.rosterhub.temporal.workflows.organization_deletion import (
        OrganizationDeletionWorkflow,
        deletion_workflow_id,
    )


@dataclass(frozen=True)
class GracePeriodSweepInput:
    """Routing for the child workflows; workflows must not read settings."""

    namespace: str
    queue_prefix: str
    queue_shards: int


@workflow.defn
class GracePeriodSweepWorkflow:
    @workflow.run
    async def run(self, input: GracePeriodSweepInput) -> dict[str, int]:
        pending: PendingDeletionOutput = await workflow.execute_activity(
            list_organizations_pending_deletion,
            start_to_close_timeout=timedelta(minutes=2),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )

        started = 0
        skipped = 0
        for organization_id in pending.organization_ids:
            route = route_for_organization(
                organization_id=organization_id,
                namespace=input.namespace,
                prefix=input.queue_prefix,
                shards=input.queue_shards,
                kind=QueueKind.ORGANIZATION,
            )
            try:
                await workflow.start_child_workflow(
                    OrganizationDeletionWorkflow.run,
                    organization_id,
                    id=deletion_workflow_id(organization_id),
                    task_queue=route.task_queue,
                    priority=route.priority,
                    parent_close_policy=ParentClosePolicy.ABANDON,
                )
            except WorkflowAlreadyStartedError:
                # A deletion for this organization is still running.
                skipped += 1
                continue
            started += 1

        workflow.logger.info(
            f"Grace-period sweep: {started} deletions started, {skipped} already running"
        )
        return {
            "pending": len(pending.organization_ids),
            "started": started,
            "skipped": skipped,
        }
