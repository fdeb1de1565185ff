"""
Organization Deletion Workflow.

1. Cancel the Stripe subscription. A failure here is non-retryable and ends
   the workflow with every row intact.
2. Purge all organization-scoped tables, then the organization row. Retried
   as a whole while the organization row survives.

The workflow id ``organization-deletion-{organization_id}`` makes runs for
one organization mutually exclusive.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.rosterhub.temporal.activities import (
        CancelSubscriptionInput,
        CancelSubscriptionOutput,
        OrganizationCtx,
        PurgeOrganizationInput,
        PurgeOrganizationOutput,
        cancel_organization_subscription,
        purge_organization,
    )


def deletion_workflow_id(organization_id: str) -> str:
    return f"organization-deletion-{organization_id}"


@workflow.defn
class OrganizationDeletionWorkflow:
    @workflow.run
    async def run(self, organization_id: str) -> dict[str, bool | str | int]:
        ctx = OrganizationCtx(organization_id=organization_id)

        cancellation: CancelSubscriptionOutput = await workflow.execute_activity(
            cancel_organization_subscription,
            CancelSubscriptionInput(ctx=ctx),
            start_to_close_timeout=timedelta(seconds=60),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )
        workflow.logger.info(
            f"Organization {organization_id} billing stopped ({cancellation.outcome})"
        )

        purge: PurgeOrganizationOutput = await workflow.execute_activity(
            purge_organization,
            PurgeOrganizationInput(ctx=ctx),
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=RetryPolicy(
                maximum_attempts=5,
                initial_interval=timedelta(seconds=30),
                backoff_coefficient=2.0,
            ),
        )
        rows = sum(purge.rows_deleted.values())
        workflow.logger.info(f"Organization {organization_id} deleted ({rows} rows)")

        return {
            "deleted": True,
            "organization_id": organization_id,
            "subscription_outcome": cancellation.outcome,
            "rows_deleted": rows,
        }
