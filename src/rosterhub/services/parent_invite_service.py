"""Parent invite service: administration and unauthenticated redemption.

Redemption admits one party per invite, even under concurrent duplicate
submissions. The conditional claim UPDATE in ``ParentInviteRepository.claim``
is the only concurrency gate; everything after it runs once per invite.

Each step commits on its own:

1. claim (pending -> accepted), committed so racing requests see it
2. account creation (identity provider commits)
3. parent profile link or create
4. role grant (insert, or reactivate a revoked grant)

Only a transient account-creation failure releases the claim. An already
registered email is rejected and the invite stays accepted. Failures in
steps 3-4 leave the invite accepted and are logged as
``invite_provisioning_incomplete``.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.stdlib import BoundLogger

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.logging import get_logger
from src.rosterhub.core.providers.identity import AccountOutcome, IdentityProvider
from src.rosterhub.core.security import generate_invite_code
from src.rosterhub.models import InviteStatus, OrganizationRole, Parent, ParentInvite
from src.rosterhub.models.base import utc_now
from src.rosterhub.repositories import (
    InviteState,
    ParentInviteRepository,
    ParentRepository,
    RoleRepository,
)
from src.rosterhub.schemas.parent_invite import ParentInviteAcceptRequest

logger = get_logger(__name__)


class InviteFailureReason(StrEnum):
    INVALID_CODE = "invalid_code"
    ALREADY_ACCEPTED = "already_accepted"
    REVOKED = "revoked"
    EXPIRED = "expired"
    EMAIL_REGISTERED = "email_registered"
    CLAIM_FAILED = "claim_failed"
    ACCOUNT_CREATION_FAILED = "account_creation_failed"
    PROVISIONING_FAILED = "provisioning_failed"


_FAILURE_STATUS: dict[InviteFailureReason, int] = {
    InviteFailureReason.INVALID_CODE: 400,
    InviteFailureReason.ALREADY_ACCEPTED: 409,
    InviteFailureReason.REVOKED: 410,
    InviteFailureReason.EXPIRED: 410,
    InviteFailureReason.EMAIL_REGISTERED: 409,
    InviteFailureReason.CLAIM_FAILED: 500,
    InviteFailureReason.ACCOUNT_CREATION_FAILED: 500,
    InviteFailureReason.PROVISIONING_FAILED: 500,
}

_FAILURE_MESSAGE: dict[InviteFailureReason, str] = {
    InviteFailureReason.INVALID_CODE: "Invalid invite code",
    InviteFailureReason.ALREADY_ACCEPTED: "Invite already accepted",
    InviteFailureReason.REVOKED: "Invite has been revoked",
    InviteFailureReason.EXPIRED: "Invite has expired",
    InviteFailureReason.EMAIL_REGISTERED: (
        "This email is already registered. Please sign in to accept this invite."
    ),
    InviteFailureReason.CLAIM_FAILED: "Failed to process invite",
    InviteFailureReason.ACCOUNT_CREATION_FAILED: "Failed to create user account. Please try again.",
    InviteFailureReason.PROVISIONING_FAILED: "Failed to complete invite acceptance",
}


@dataclass(frozen=True)
class InviteAcceptanceResult:
    success: bool
    parent_id: UUID | None = None
    user_id: UUID | None = None
    reason: InviteFailureReason | None = None
    error: str | None = None
    http_status: int = 200

    @classmethod
    def ok(cls, parent_id: UUID, user_id: UUID) -> "InviteAcceptanceResult":
        return cls(success=True, parent_id=parent_id, user_id=user_id)

    @classmethod
    def failed(
        cls, reason: InviteFailureReason, error: str | None = None
    ) -> "InviteAcceptanceResult":
        return cls(
            success=False,
            reason=reason,
            error=error or _FAILURE_MESSAGE[reason],
            http_status=_FAILURE_STATUS[reason],
        )


class InviteNotFoundError(Exception):
    """Invite does not exist in this organization."""


class InviteNotPendingError(Exception):
    """Invite is no longer pending and cannot be revoked."""


def _reason_for_unclaimable(state: InviteState | None) -> InviteFailureReason:
    if state is not None and state.status == InviteStatus.ACCEPTED.value:
        return InviteFailureReason.ALREADY_ACCEPTED
    if state is not None and state.status == InviteStatus.REVOKED.value:
        return InviteFailureReason.REVOKED
    if state is not None and state.expires_at > utc_now():
        # Still pending and live: a concurrent claim was just released.
        return InviteFailureReason.CLAIM_FAILED
    return InviteFailureReason.EXPIRED


class ParentInviteService:
    def __init__(self, session: AsyncSession, identity: IdentityProvider):
        self.session = session
        self.identity = identity
        self.invite_repo = ParentInviteRepository(session)
        self.parent_repo = ParentRepository(session)
        self.role_repo = RoleRepository(session)

    async def accept_invite(
        self,
        organization_id: UUID,
        request: ParentInviteAcceptRequest,
    ) -> InviteAcceptanceResult:
        """Redeem an invite code, creating the account, profile and role grant.

        Expected business outcomes (bad code, conflicts, gone invites, failed
        provisioning) come back as a failed result carrying an HTTP status
        hint; only unexpected errors raise.
        """
        invite = await self.invite_repo.get_by_code(request.code)
        # Not found and wrong organization are indistinguishable to the caller.
        if invite is None or invite.organization_id != organization_id:
            return InviteAcceptanceResult.failed(InviteFailureReason.INVALID_CODE)

        log = logger.bind(organization_id=str(organization_id), invite_id=str(invite.id))

        # Advisory only; the claim below is the real guard.
        if invite.status == InviteStatus.ACCEPTED.value:
            return InviteAcceptanceResult.failed(InviteFailureReason.ALREADY_ACCEPTED)
        if invite.status == InviteStatus.REVOKED.value:
            return InviteAcceptanceResult.failed(InviteFailureReason.REVOKED)
        if invite.is_expired():
            return InviteAcceptanceResult.failed(InviteFailureReason.EXPIRED)

        invite_id = invite.id
        target_role = invite.role

        try:
            claimed = await self.invite_repo.claim(invite_id, utc_now())
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error("Invite claim failed", error=str(e))
            return InviteAcceptanceResult.failed(InviteFailureReason.CLAIM_FAILED)

        if not claimed:
            state = await self.invite_repo.get_current_state(invite_id)
            reason = _reason_for_unclaimable(state)
            log.info("Invite claim lost", reason=reason.value)
            return InviteAcceptanceResult.failed(reason)

        try:
            account = await self.identity.create_account(request.email, request.password)
        except Exception:
            log.exception("Identity provider raised during account creation")
            await self.session.rollback()
            await self._release_claim(invite_id, log)
            raise

        if account.outcome is AccountOutcome.ALREADY_EXISTS:
            # Deliberate reject: the invite stays accepted.
            log.info("Invite rejected, email already registered")
            return InviteAcceptanceResult.failed(InviteFailureReason.EMAIL_REGISTERED)

        if account.outcome is AccountOutcome.FAILED or account.user_id is None:
            await self._release_claim(invite_id, log)
            return InviteAcceptanceResult.failed(InviteFailureReason.ACCOUNT_CREATION_FAILED)

        user_id = account.user_id

        try:
            parent_id = await self._link_or_create_parent(organization_id, user_id, request)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error(
                "invite_provisioning_incomplete",
                step="parent",
                user_id=str(user_id),
                error=str(e),
            )
            return InviteAcceptanceResult.failed(
                InviteFailureReason.PROVISIONING_FAILED, "Failed to create parent record"
            )

        try:
            await self._grant_role(user_id, organization_id, target_role, log)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error(
                "invite_provisioning_incomplete",
                step="role_grant",
                user_id=str(user_id),
                parent_id=str(parent_id),
                error=str(e),
            )
            return InviteAcceptanceResult.failed(
                InviteFailureReason.PROVISIONING_FAILED, "Failed to create membership"
            )

        log.info("Invite accepted", user_id=str(user_id), parent_id=str(parent_id))
        return InviteAcceptanceResult.ok(parent_id=parent_id, user_id=user_id)

    async def _release_claim(self, invite_id: UUID, log: BoundLogger) -> None:
        """Compensate a claim after a transient account-creation failure."""
        try:
            released = await self.invite_repo.release_claim(invite_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error("Invite claim rollback failed", error=str(e))
            return
        log.warning("Invite claim rolled back after account creation failure", released=released)

    async def _link_or_create_parent(
        self,
        organization_id: UUID,
        user_id: UUID,
        request: ParentInviteAcceptRequest,
    ) -> UUID:
        parent = await self.parent_repo.find_linkable(organization_id, request.email)
        if parent is None:
            parent = Parent(
                organization_id=organization_id,
                user_id=user_id,
                first_name=request.first_name,
                last_name=request.last_name,
                email=request.email,
            )
        else:
            # Keep admin-entered fields (relationship, student, notes).
            parent.user_id = user_id
            parent.first_name = request.first_name
            parent.last_name = request.last_name
            parent.updated_at = utc_now()
        self.parent_repo.add(parent)
        await self.session.flush()
        return parent.id

    async def _grant_role(
        self, user_id: UUID, organization_id: UUID, role: str, log: BoundLogger
    ) -> None:
        try:
            await self.role_repo.insert_grant(user_id, organization_id, role)
            return
        except IntegrityError:
            # Nothing else is pending: the parent step has just committed.
            await self.session.rollback()

        # A grant already exists for (user, organization). Revoked grants come
        # back with the invite's role; active grants are left as they are.
        reactivated = await self.role_repo.reactivate_revoked(user_id, organization_id, role)
        log.info("Existing role grant found", reactivated=reactivated, user_id=str(user_id))

    async def create_invite(
        self,
        organization_id: UUID,
        created_by_user_id: UUID,
        email: str | None = None,
        role: str = OrganizationRole.PARENT.value,
    ) -> ParentInvite:
        settings = get_settings()
        invite = ParentInvite(
            organization_id=organization_id,
            code=generate_invite_code(),
            email=email,
            role=role,
            status=InviteStatus.PENDING.value,
            expires_at=utc_now() + timedelta(days=settings.parent_invite_expire_days),
            created_by_user_id=created_by_user_id,
        )
        self.invite_repo.add(invite)
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self.session.refresh(invite)

        logger.info(
            "Parent invite created",
            organization_id=str(organization_id),
            invite_id=str(invite.id),
            created_by=str(created_by_user_id),
        )
        return invite

    async def revoke_invite(self, organization_id: UUID, invite_id: UUID) -> None:
        """Revoke a pending invite (expired-but-pending included).

        Raises:
            InviteNotFoundError: No such invite in this organization.
            InviteNotPendingError: The invite was already accepted or revoked.
        """
        revoked = await self.invite_repo.revoke(invite_id, organization_id)
        if revoked:
            await self.session.commit()
            logger.info(
                "Parent invite revoked",
                organization_id=str(organization_id),
                invite_id=str(invite_id),
            )
            return

        await self.session.rollback()
        invite = await self.invite_repo.get_for_organization(invite_id, organization_id)
        if invite is None:
            raise InviteNotFoundError(str(invite_id))
        raise InviteNotPendingError(invite.status)

    async def list_invites(
        self, organization_id: UUID, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[ParentInvite], str | None, bool]:
        return await self.invite_repo.list_by_organization(organization_id, cursor, limit)
