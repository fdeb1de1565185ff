"""Grace-period sweep activity."""

from dataclasses import dataclass, field

from temporalio import activity

from src.rosterhub.core.db import get_session
from src.rosterhub.core.grace_period import compute_grace_period_info
from src.rosterhub.repositories import SubscriptionRepository


@dataclass(frozen=True)
class PendingDeletionOutput:
    organization_ids: list[str] = field(default_factory=list)


@activity.defn
async def list_organizations_pending_deletion() -> PendingDeletionOutput:
    """Organizations whose canceled subscription is past its grace period.

    Read-only, so freely retryable.
    """
    async with get_session() as session:
        subscriptions = await SubscriptionRepository(session).list_canceled()

    expired = [
        str(sub.organization_id)
        for sub in subscriptions
        if compute_grace_period_info(sub.to_snapshot()).is_grace_period_expired
    ]
    activity.logger.info(
        f"{len(expired)} of {len(subscriptions)} canceled organizations past grace period"
    )
    return PendingDeletionOutput(organization_ids=expired)
