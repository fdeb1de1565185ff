"""Identity provider adapter.

Accounts live in the ``users`` table; bearer tokens for them are signed with
the shared JWT secret. Database errors are classified here, once, into
``AccountOutcome``.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.rosterhub.core.logging import get_logger
from src.rosterhub.core.security import hash_password
from src.rosterhub.models import User
from src.rosterhub.repositories import UserRepository

logger = get_logger(__name__)


class AccountOutcome(StrEnum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass(frozen=True)
class AccountResult:
    outcome: AccountOutcome
    user_id: UUID | None = None
    error: str | None = None


class IdentityProvider(Protocol):
    async def create_account(self, email: str, password: str) -> AccountResult: ...


class DatabaseIdentityProvider:
    """Creates accounts in the ``users`` table.

    Account creation is committed on its own: once created, an account exists
    regardless of what the caller does next.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)

    async def create_account(self, email: str, password: str) -> AccountResult:
        try:
            if await self.user_repo.get_by_email(email) is not None:
                return AccountResult(outcome=AccountOutcome.ALREADY_EXISTS)

            user = User(email=email, hashed_password=hash_password(password))
            self.user_repo.add(user)
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email.
            await self.session.rollback()
            return AccountResult(outcome=AccountOutcome.ALREADY_EXISTS)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Account creation failed", error=str(e))
            return AccountResult(outcome=AccountOutcome.FAILED, error=str(e))

        return AccountResult(outcome=AccountOutcome.CREATED, user_id=user.id)
