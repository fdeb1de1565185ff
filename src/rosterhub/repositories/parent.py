"""Repository for parent profiles."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.rosterhub.models import Parent
from src.rosterhub.repositories.base import BaseRepository


class ParentRepository(BaseRepository[Parent]):
    model = Parent

    async def find_linkable(self, organization_id: UUID, email: str) -> Parent | None:
        """Oldest live, unlinked profile in the organization matching ``email``.

        Email matching is case-insensitive. Profiles already linked to an
        account are never relinked.
        """
        result = await self.session.execute(
            select(Parent)
            .where(
                Parent.organization_id == organization_id,
                func.lower(Parent.email) == email.lower(),
                Parent.deleted_at.is_(None),  # type: ignore[union-attr]
                Parent.user_id.is_(None),  # type: ignore[union-attr]
            )
            .order_by(Parent.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()
