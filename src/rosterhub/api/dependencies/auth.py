"""Authentication and organization role dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.rosterhub.api.dependencies.db import DBSession
from src.rosterhub.core.logging import bind_organization_context, bind_user_context
from src.rosterhub.core.security import decode_access_token
from src.rosterhub.models import OrganizationRole, User
from src.rosterhub.repositories import RoleRepository, UserRepository


async def get_current_user(
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer token and return its active user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    user_id = decode_access_token(authorization.removeprefix("Bearer "))
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user = await UserRepository(session).get_by_id(user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, email=user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_org_member(
    organization_id: UUID,
    current_user: CurrentUser,
    session: DBSession,
) -> User:
    """Require an active role grant in the organization named in the path."""
    role = await RoleRepository(session).get_active_role(current_user.id, organization_id)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have access to this organization",
        )
    bind_organization_context(organization_id)
    return current_user


OrgMember = Annotated[User, Depends(require_org_member)]


async def require_org_admin(
    organization_id: UUID,
    current_user: CurrentUser,
    session: DBSession,
) -> User:
    """Require an active admin grant in the organization named in the path."""
    role = await RoleRepository(session).get_active_role(current_user.id, organization_id)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have access to this organization",
        )
    if role != OrganizationRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required for this operation",
        )
    bind_organization_context(organization_id)
    return current_user


OrgAdmin = Annotated[User, Depends(require_org_admin)]
