"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.rosterhub.api.dependencies.db import DBSession
from src.rosterhub.core.providers.identity import DatabaseIdentityProvider
from src.rosterhub.core.providers.payments import get_payment_gateway
from src.rosterhub.services import (
    OrganizationDeletionService,
    ParentInviteService,
    SubscriptionService,
)


def get_parent_invite_service(session: DBSession) -> ParentInviteService:
    return ParentInviteService(session, DatabaseIdentityProvider(session))


def get_organization_deletion_service(session: DBSession) -> OrganizationDeletionService:
    return OrganizationDeletionService(session, get_payment_gateway())


def get_subscription_service(session: DBSession) -> SubscriptionService:
    return SubscriptionService(session)


ParentInviteServiceDep = Annotated[ParentInviteService, Depends(get_parent_invite_service)]
OrganizationDeletionServiceDep = Annotated[
    OrganizationDeletionService, Depends(get_organization_deletion_service)
]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]
