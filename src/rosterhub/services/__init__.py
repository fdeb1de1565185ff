from src.rosterhub.services.organization_deletion_service import OrganizationDeletionService
from src.rosterhub.services.parent_invite_service import ParentInviteService
from src.rosterhub.services.subscription_service import SubscriptionService

__all__ = ["OrganizationDeletionService", "ParentInviteService", "SubscriptionService"]
