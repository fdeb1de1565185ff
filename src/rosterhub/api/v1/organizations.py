"""Organization billing state and teardown endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.rosterhub.api.dependencies import (
    DBSession,
    OrgAdmin,
    OrgMember,
    OrganizationDeletionServiceDep,
)
from src.rosterhub.core.grace_period import compute_grace_period_info, should_block_access
from src.rosterhub.core.logging import get_logger
from src.rosterhub.repositories import SubscriptionRepository
from src.rosterhub.schemas.organization import OrganizationDeleteResponse
from src.rosterhub.schemas.subscription import GracePeriodRead, SubscriptionStatusResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get(
    "/{organization_id}/subscription",
    response_model=SubscriptionStatusResponse,
    summary="Subscription and grace-period state",
)
async def get_subscription_status(
    organization_id: UUID,
    member: OrgMember,
    session: DBSession,
) -> SubscriptionStatusResponse:
    """Billing state as seen by access control.

    Readable even when access is blocked, so the client can send the user to billing.
    """
    subscription = await SubscriptionRepository(session).get_by_organization(organization_id)
    snapshot = subscription.to_snapshot() if subscription is not None else None
    info = compute_grace_period_info(snapshot)
    return SubscriptionStatusResponse(
        status=subscription.status if subscription is not None else None,
        current_period_end=subscription.current_period_end if subscription is not None else None,
        grace_period=GracePeriodRead(
            is_in_grace_period=info.is_in_grace_period,
            is_grace_period_expired=info.is_grace_period_expired,
            days_remaining=info.days_remaining,
            grace_period_ends_at=info.grace_period_ends_at,
            is_canceling=info.is_canceling,
            is_canceled=info.is_canceled,
            is_read_only=info.is_read_only,
        ),
        should_block_access=should_block_access(snapshot),
    )


@router.delete(
    "/{organization_id}",
    response_model=OrganizationDeleteResponse,
    summary="Delete organization",
    responses={
        500: {"description": "Data purge did not complete; safe to retry"},
        502: {"description": "Payment cancellation failed; nothing was deleted"},
    },
)
async def delete_organization(
    organization_id: UUID,
    admin_user: OrgAdmin,
    service: OrganizationDeletionServiceDep,
) -> OrganizationDeleteResponse:
    """Cancel billing, then permanently delete the organization and all of its data."""
    logger.info(
        "Organization deletion requested",
        organization_id=str(organization_id),
        requested_by=str(admin_user.id),
    )
    result = await service.delete_organization(organization_id)

    if result.halted:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to cancel subscription. Organization was not deleted.",
        )
    if not result.deleted:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete organization",
        )

    outcome = result.cancellation.outcome.value if result.cancellation else None
    return OrganizationDeleteResponse(
        organization_id=organization_id,
        subscription_outcome=outcome,
    )
