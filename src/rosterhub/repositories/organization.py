"""Repositories for the organization tenant root and its subscription."""

from uuid import UUID

from sqlmodel import select

from src.rosterhub.models import Organization, OrganizationSubscription, SubscriptionStatus
from src.rosterhub.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def exists(self, organization_id: UUID) -> bool:
        result = await self.session.execute(
            select(Organization.id).where(Organization.id == organization_id)
        )
        return result.scalar_one_or_none() is not None


class SubscriptionRepository(BaseRepository[OrganizationSubscription]):
    model = OrganizationSubscription

    async def get_by_organization(self, organization_id: UUID) -> OrganizationSubscription | None:
        result = await self.session.execute(
            select(OrganizationSubscription).where(
                OrganizationSubscription.organization_id == organization_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_stripe_subscription_id(
        self, stripe_subscription_id: str
    ) -> OrganizationSubscription | None:
        result = await self.session.execute(
            select(OrganizationSubscription).where(
                OrganizationSubscription.stripe_subscription_id == stripe_subscription_id
            )
        )
        return result.scalar_one_or_none()

    async def list_canceled(self) -> list[OrganizationSubscription]:
        """All canceled subscriptions; grace-period expiry is decided by the caller."""
        result = await self.session.execute(
            select(OrganizationSubscription).where(
                OrganizationSubscription.status == SubscriptionStatus.CANCELED.value
            )
        )
        return list(result.scalars().all())
