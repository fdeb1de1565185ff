"""Repository for authentication accounts."""

from sqlalchemy import func
from sqlmodel import select

from src.rosterhub.models import User
from src.rosterhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()
