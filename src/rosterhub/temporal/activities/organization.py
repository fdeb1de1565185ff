"""Organization deletion activities.

Both activities are idempotent: cancelling an already canceled subscription
is a success, and purging an organization that is already gone deletes
zero rows.
"""

from dataclasses import dataclass, field

from temporalio import activity
from temporalio.exceptions import ApplicationError

from src.rosterhub.core.db import get_session
from src.rosterhub.core.providers.payments import get_payment_gateway
from src.rosterhub.services.organization_deletion_service import OrganizationDeletionService
from src.rosterhub.temporal.context import OrganizationCtx

PAYMENT_CANCELLATION_FAILED = "PaymentCancellationFailed"
PURGE_INCOMPLETE = "OrganizationPurgeIncomplete"


@dataclass(frozen=True)
class CancelSubscriptionInput:
    ctx: OrganizationCtx


@dataclass(frozen=True)
class CancelSubscriptionOutput:
    outcome: str


@dataclass(frozen=True)
class PurgeOrganizationInput:
    ctx: OrganizationCtx


@dataclass(frozen=True)
class PurgeOrganizationOutput:
    rows_deleted: dict[str, int] = field(default_factory=dict)


@activity.defn
async def cancel_organization_subscription(
    input: CancelSubscriptionInput,
) -> CancelSubscriptionOutput:
    """Cancel the organization's Stripe subscription.

    Raises:
        ApplicationError: non-retryable, when Stripe reports anything other
            than canceled, already canceled or not found. The workflow stops
            before any data is deleted and the failure is left for an
            operator.
    """
    async with get_session() as session:
        service = OrganizationDeletionService(session, get_payment_gateway())
        result = await service.cancel_payment_subscription(input.ctx.organization_uuid)

    if not result.safe_to_proceed:
        raise ApplicationError(
            f"Payment cancellation failed: {result.error}",
            type=PAYMENT_CANCELLATION_FAILED,
            non_retryable=True,
        )

    activity.logger.info(
        f"Subscription for organization {input.ctx.organization_id}: {result.outcome}"
    )
    return CancelSubscriptionOutput(outcome=result.outcome.value)


@activity.defn
async def purge_organization(input: PurgeOrganizationInput) -> PurgeOrganizationOutput:
    """Delete all organization-scoped rows and the organization row.

    Raises:
        ApplicationError: retryable, when the organization row survived. The
            retry re-runs every table; emptied tables cost a zero-row delete.
    """
    async with get_session() as session:
        service = OrganizationDeletionService(session, get_payment_gateway())
        result = await service.purge_organization(input.ctx.organization_uuid)

    if not result.deleted:
        raise ApplicationError(
            f"Organization {input.ctx.organization_id} still present "
            f"(failed tables: {', '.join(result.failed_collections) or 'none'})",
            type=PURGE_INCOMPLETE,
        )

    activity.logger.info(f"Organization {input.ctx.organization_id} purged")
    return PurgeOrganizationOutput(rows_deleted=result.rows_deleted)
