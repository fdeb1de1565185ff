"""Repository for parent invites.

State changes go through conditional UPDATEs whose WHERE clause carries the
expected current state. The affected row count tells the caller whether its
transition won; no row is ever read-then-written.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlmodel import select, update

from src.rosterhub.models import InviteStatus, ParentInvite
from src.rosterhub.repositories.base import BaseRepository


@dataclass(frozen=True)
class InviteState:
    """Column snapshot of an invite, read straight from the database."""

    status: str
    expires_at: datetime


class ParentInviteRepository(BaseRepository[ParentInvite]):
    model = ParentInvite

    async def get_by_code(self, code: str) -> ParentInvite | None:
        result = await self.session.execute(select(ParentInvite).where(ParentInvite.code == code))
        return result.scalar_one_or_none()

    async def claim(self, invite_id: UUID, now: datetime) -> bool:
        """Atomically move a live invite from pending to accepted.

        Under concurrent callers at most one sees a row affected.
        """
        result = await self.session.execute(
            update(ParentInvite)
            .where(ParentInvite.id == invite_id)  # type: ignore[arg-type]
            .where(ParentInvite.status == InviteStatus.PENDING.value)  # type: ignore[arg-type]
            .where(ParentInvite.expires_at > now)  # type: ignore[arg-type]
            .values(status=InviteStatus.ACCEPTED.value, accepted_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def release_claim(self, invite_id: UUID) -> bool:
        """Undo a claim: accepted back to pending, only if still accepted."""
        result = await self.session.execute(
            update(ParentInvite)
            .where(ParentInvite.id == invite_id)  # type: ignore[arg-type]
            .where(ParentInvite.status == InviteStatus.ACCEPTED.value)  # type: ignore[arg-type]
            .values(status=InviteStatus.PENDING.value, accepted_at=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def revoke(self, invite_id: UUID, organization_id: UUID) -> bool:
        """Move a pending invite of this organization to revoked."""
        result = await self.session.execute(
            update(ParentInvite)
            .where(ParentInvite.id == invite_id)  # type: ignore[arg-type]
            .where(ParentInvite.organization_id == organization_id)  # type: ignore[arg-type]
            .where(ParentInvite.status == InviteStatus.PENDING.value)  # type: ignore[arg-type]
            .values(status=InviteStatus.REVOKED.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def get_current_state(self, invite_id: UUID) -> InviteState | None:
        """Read status columns directly, bypassing any stale identity-map copy."""
        result = await self.session.execute(
            select(ParentInvite.status, ParentInvite.expires_at).where(
                ParentInvite.id == invite_id
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return InviteState(status=row.status, expires_at=row.expires_at)

    async def get_for_organization(
        self, invite_id: UUID, organization_id: UUID
    ) -> ParentInvite | None:
        result = await self.session.execute(
            select(ParentInvite).where(
                ParentInvite.id == invite_id,
                ParentInvite.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_organization(
        self, organization_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[ParentInvite], str | None, bool]:
        query = select(ParentInvite).where(ParentInvite.organization_id == organization_id)
        return await self.paginate(query, cursor, limit, ParentInvite.created_at)
