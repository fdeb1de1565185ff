"""Subscription lifecycle sync from Stripe webhook events."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.rosterhub.core.grace_period import calculate_grace_period_end
from src.rosterhub.core.logging import get_logger
from src.rosterhub.models import OrganizationSubscription, SubscriptionStatus
from src.rosterhub.models.base import utc_now
from src.rosterhub.repositories import SubscriptionRepository

logger = get_logger(__name__)

SUBSCRIPTION_EVENTS = frozenset(
    {
        "customer.subscription.created",
        "customer.subscription.updated",
        "customer.subscription.deleted",
    }
)

_KNOWN_STATUSES = frozenset(s.value for s in SubscriptionStatus)


def map_stripe_status(event_type: str, stripe_object: dict[str, Any]) -> str:
    """Local status for a Stripe subscription object."""
    if event_type == "customer.subscription.deleted":
        return SubscriptionStatus.CANCELED.value

    stripe_status = stripe_object.get("status")
    if stripe_object.get("cancel_at_period_end") and stripe_status != "canceled":
        return SubscriptionStatus.CANCELING.value
    if stripe_status in _KNOWN_STATUSES:
        return str(stripe_status)
    return SubscriptionStatus.PENDING.value


def _current_period_end(stripe_object: dict[str, Any]) -> datetime | None:
    # Newer API versions moved the period onto subscription items.
    timestamp = stripe_object.get("current_period_end")
    if timestamp is None:
        items = (stripe_object.get("items") or {}).get("data") or []
        if items:
            timestamp = items[0].get("current_period_end")
    if timestamp is None:
        return None
    return datetime.fromtimestamp(int(timestamp), UTC).replace(tzinfo=None)


class SubscriptionService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.subscription_repo = SubscriptionRepository(session)

    async def _locate(self, stripe_object: dict[str, Any]) -> OrganizationSubscription | None:
        subscription_id = stripe_object.get("id")
        if subscription_id:
            found = await self.subscription_repo.get_by_stripe_subscription_id(subscription_id)
            if found is not None:
                return found

        organization_id = (stripe_object.get("metadata") or {}).get("organization_id")
        if not organization_id:
            return None
        try:
            org_uuid = UUID(str(organization_id))
        except ValueError:
            return None
        return await self.subscription_repo.get_by_organization(org_uuid)

    async def sync_from_stripe_event(
        self, event_type: str, stripe_object: dict[str, Any]
    ) -> OrganizationSubscription | None:
        """Apply a subscription event. Returns the updated row, or None if ignored."""
        if event_type not in SUBSCRIPTION_EVENTS:
            return None

        subscription = await self._locate(stripe_object)
        if subscription is None:
            logger.warning(
                "Stripe event for unknown subscription",
                event_type=event_type,
                subscription_id=stripe_object.get("id"),
            )
            return None

        status = map_stripe_status(event_type, stripe_object)
        previous = subscription.status

        canceled = SubscriptionStatus.CANCELED.value
        if status == canceled:
            # Only the transition into canceled starts the clock; redeliveries keep it.
            if previous != canceled or subscription.grace_period_ends_at is None:
                subscription.grace_period_ends_at = datetime.fromisoformat(
                    calculate_grace_period_end()
                )
        elif status in (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value):
            subscription.grace_period_ends_at = None

        subscription.status = status
        if stripe_object.get("id"):
            subscription.stripe_subscription_id = stripe_object["id"]
        customer = stripe_object.get("customer")
        if isinstance(customer, str):
            subscription.stripe_customer_id = customer
        period_end = _current_period_end(stripe_object)
        if period_end is not None:
            subscription.current_period_end = period_end
        subscription.updated_at = utc_now()

        self.subscription_repo.add(subscription)
        await self.session.commit()

        logger.info(
            "Subscription synced",
            organization_id=str(subscription.organization_id),
            event_type=event_type,
            previous_status=previous,
            status=status,
        )
        return subscription
