"""Repository for user/organization role grants."""

from uuid import UUID

from sqlmodel import select, update

from src.rosterhub.models import RoleGrantStatus, UserOrganizationRole
from src.rosterhub.repositories.base import BaseRepository


class RoleRepository(BaseRepository[UserOrganizationRole]):
    model = UserOrganizationRole

    async def get_for_user(
        self, user_id: UUID, organization_id: UUID
    ) -> UserOrganizationRole | None:
        result = await self.session.execute(
            select(UserOrganizationRole).where(
                UserOrganizationRole.user_id == user_id,
                UserOrganizationRole.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_active_role(self, user_id: UUID, organization_id: UUID) -> str | None:
        """Role name of the user's active grant, or None."""
        result = await self.session.execute(
            select(UserOrganizationRole.role).where(
                UserOrganizationRole.user_id == user_id,
                UserOrganizationRole.organization_id == organization_id,
                UserOrganizationRole.status == RoleGrantStatus.ACTIVE.value,
            )
        )
        return result.scalar_one_or_none()

    async def insert_grant(self, user_id: UUID, organization_id: UUID, role: str) -> None:
        """Insert an active grant. Raises IntegrityError if one exists for the pair."""
        self.session.add(
            UserOrganizationRole(
                user_id=user_id,
                organization_id=organization_id,
                role=role,
                status=RoleGrantStatus.ACTIVE.value,
            )
        )
        await self.session.flush()

    async def reactivate_revoked(self, user_id: UUID, organization_id: UUID, role: str) -> bool:
        """Turn a revoked grant back on with ``role``. Active grants are untouched."""
        revoked = RoleGrantStatus.REVOKED.value
        result = await self.session.execute(
            update(UserOrganizationRole)
            .where(UserOrganizationRole.user_id == user_id)  # type: ignore[arg-type]
            .where(UserOrganizationRole.organization_id == organization_id)  # type: ignore[arg-type]
            .where(UserOrganizationRole.status == revoked)  # type: ignore[arg-type]
            .values(status=RoleGrantStatus.ACTIVE.value, role=role)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
