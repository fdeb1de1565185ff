"""Subscription-based access guards.

``require_org_access`` gates every organization route that reads data;
``require_org_writable`` additionally refuses mutations while the
organization sits in its read-only grace period.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status

from src.rosterhub.api.dependencies.db import DBSession
from src.rosterhub.core.grace_period import (
    SubscriptionSnapshot,
    is_org_read_only,
    should_block_access,
)
from src.rosterhub.repositories import SubscriptionRepository


async def get_subscription_snapshot(
    organization_id: UUID, session: DBSession
) -> SubscriptionSnapshot | None:
    subscription = await SubscriptionRepository(session).get_by_organization(organization_id)
    if subscription is None:
        return None
    return subscription.to_snapshot()


Snapshot = Annotated[SubscriptionSnapshot | None, Depends(get_subscription_snapshot)]


async def require_org_access(snapshot: Snapshot) -> SubscriptionSnapshot | None:
    if should_block_access(snapshot):
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Subscription required to access this organization",
        )
    return snapshot


async def require_org_writable(snapshot: Snapshot) -> SubscriptionSnapshot | None:
    if should_block_access(snapshot):
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Subscription required to access this organization",
        )
    if is_org_read_only(snapshot):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization is read-only until the subscription is renewed",
        )
    return snapshot


OrgAccess = Annotated[SubscriptionSnapshot | None, Depends(require_org_access)]
OrgWritable = Annotated[SubscriptionSnapshot | None, Depends(require_org_writable)]
