"""FastAPI dependency injection definitions."""

from src.rosterhub.api.dependencies.access import (
    OrgAccess,
    OrgWritable,
    require_org_access,
    require_org_writable,
)
from src.rosterhub.api.dependencies.auth import (
    CurrentUser,
    OrgAdmin,
    OrgMember,
    get_current_user,
    require_org_admin,
    require_org_member,
)
from src.rosterhub.api.dependencies.db import DBSession, get_db_session
from src.rosterhub.api.dependencies.services import (
    OrganizationDeletionServiceDep,
    ParentInviteServiceDep,
    SubscriptionServiceDep,
    get_organization_deletion_service,
    get_parent_invite_service,
    get_subscription_service,
)

__all__ = [
    "CurrentUser",
    "DBSession",
    "OrgAccess",
    "OrgAdmin",
    "OrgMember",
    "OrgWritable",
    "OrganizationDeletionServiceDep",
    "ParentInviteServiceDep",
    "SubscriptionServiceDep",
    "get_current_user",
    "get_db_session",
    "get_organization_deletion_service",
    "get_parent_invite_service",
    "get_subscription_service",
    "require_org_access",
    "require_org_admin",
    "require_org_member",
    "require_org_writable",
]
