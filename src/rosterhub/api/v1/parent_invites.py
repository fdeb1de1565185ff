"""Parent invite API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from src.rosterhub.api.dependencies import (
    OrgAccess,
    OrgAdmin,
    OrgWritable,
    ParentInviteServiceDep,
)
from src.rosterhub.core.config import get_settings
from src.rosterhub.core.exceptions import BadRequestValidationRoute
from src.rosterhub.core.logging import bind_organization_context
from src.rosterhub.core.rate_limit import limiter
from src.rosterhub.models import ParentInvite
from src.rosterhub.schemas.pagination import PaginatedResponse
from src.rosterhub.schemas.parent_invite import (
    ParentInviteAcceptRequest,
    ParentInviteAcceptResponse,
    ParentInviteCreateRequest,
    ParentInviteRead,
)
from src.rosterhub.services.parent_invite_service import (
    InviteNotFoundError,
    InviteNotPendingError,
)

PREFIX = "/organizations/{organization_id}/parents"

router = APIRouter(prefix=PREFIX, tags=["parent-invites"])
# Unauthenticated redemption reports malformed input as 400.
public_router = APIRouter(
    prefix=PREFIX, tags=["parent-invites"], route_class=BadRequestValidationRoute
)


def _to_read(invite: ParentInvite) -> ParentInviteRead:
    return ParentInviteRead(
        id=invite.id,
        organization_id=invite.organization_id,
        code=invite.code,
        email=invite.email,
        role=invite.role,
        status=invite.effective_status,
        expires_at=invite.expires_at,
        accepted_at=invite.accepted_at,
        created_at=invite.created_at,
    )


# =============================================================================
# Public Endpoint (no authentication, rate limited per client IP)
# =============================================================================


@public_router.post(
    "/invite/accept",
    response_model=ParentInviteAcceptResponse,
    summary="Accept parent invite",
    responses={
        400: {"description": "Invalid invite code, request body or organization id"},
        409: {"description": "Invite already accepted, or email already registered"},
        410: {"description": "Invite revoked or expired"},
        429: {"description": "Too many attempts"},
    },
)
@limiter.limit(get_settings().invite_accept_rate_limit)
async def accept_invite(
    request: Request,
    organization_id: UUID,
    accept_data: ParentInviteAcceptRequest,
    service: ParentInviteServiceDep,
) -> ParentInviteAcceptResponse:
    """Redeem an invite code: create the account, the parent profile and the role grant."""
    bind_organization_context(organization_id)
    result = await service.accept_invite(organization_id, accept_data)
    if not result.success or result.parent_id is None or result.user_id is None:
        raise HTTPException(status_code=result.http_status, detail=result.error)
    return ParentInviteAcceptResponse(parent_id=result.parent_id, user_id=result.user_id)


# =============================================================================
# Admin Endpoints
# =============================================================================


@router.post(
    "/invites",
    response_model=ParentInviteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create parent invite",
)
async def create_invite(
    organization_id: UUID,
    invite_data: ParentInviteCreateRequest,
    admin_user: OrgAdmin,
    _writable: OrgWritable,
    service: ParentInviteServiceDep,
) -> ParentInviteRead:
    invite = await service.create_invite(
        organization_id,
        created_by_user_id=admin_user.id,
        email=invite_data.email,
        role=invite_data.role,
    )
    return _to_read(invite)


@router.get(
    "/invites",
    response_model=PaginatedResponse[ParentInviteRead],
    summary="List parent invites",
)
async def list_invites(
    organization_id: UUID,
    admin_user: OrgAdmin,
    _access: OrgAccess,
    service: ParentInviteServiceDep,
    cursor: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> PaginatedResponse[ParentInviteRead]:
    """Newest first. Pending invites past their expiry are reported as ``expired``."""
    invites, next_cursor, has_more = await service.list_invites(organization_id, cursor, limit)
    return PaginatedResponse(
        items=[_to_read(invite) for invite in invites],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.delete(
    "/invites/{invite_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke parent invite",
    responses={
        404: {"description": "Invite not found"},
        409: {"description": "Invite is no longer pending"},
    },
)
async def revoke_invite(
    organization_id: UUID,
    invite_id: UUID,
    admin_user: OrgAdmin,
    _writable: OrgWritable,
    service: ParentInviteServiceDep,
) -> None:
    try:
        await service.revoke_invite(organization_id, invite_id)
    except InviteNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invite not found",
        ) from e
    except InviteNotPendingError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invite is already {e}",
        ) from e
