"""Base repository with common CRUD operations."""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.rosterhub.schemas.pagination import decode_cursor, encode_cursor

_CURSOR_SEPARATOR = "|"

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit,
    rollback) belongs to the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Newest-first keyset pagination on ``(cursor_field, id)``.

        The id breaks ties between rows written in the same instant, so a
        page boundary never skips or repeats a row.

        Returns:
            (items, next_cursor, has_more). An undecodable cursor restarts
            from the first page.
        """
        id_field = self.model.id  # type: ignore[attr-defined]
        position = _parse_cursor(cursor) if cursor else None
        if position is not None:
            after, after_id = position
            query = query.where(
                or_(cursor_field < after, and_(cursor_field == after, id_field < after_id))
            )

        query = query.order_by(cursor_field.desc(), id_field.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]

        next_cursor = None
        if has_more:
            last = items[-1]
            value: datetime = getattr(last, cursor_field.key)
            next_cursor = encode_cursor(f"{value.isoformat()}{_CURSOR_SEPARATOR}{last.id}")

        return items, next_cursor, has_more


def _parse_cursor(cursor: str) -> tuple[datetime, UUID] | None:
    try:
        timestamp, _, row_id = decode_cursor(cursor).partition(_CURSOR_SEPARATOR)
        return datetime.fromisoformat(timestamp), UUID(row_id)
    except ValueError:
        return None
