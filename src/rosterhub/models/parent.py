"""Parent directory models: invites and parent profiles."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field

from src.rosterhub.models.base import OrganizationScopedModel, utc_now
from src.rosterhub.models.enums import InviteStatus, OrganizationRole


class ParentInvite(OrganizationScopedModel, table=True):
    """One-time code admitting a parent into an organization.

    Transitions: pending -> accepted (claim), pending -> revoked (admin),
    accepted -> pending (claim rollback after a failed account creation).
    """

    __tablename__ = "parent_invites"

    code: str = Field(max_length=200, unique=True, index=True)
    email: str | None = Field(default=None, max_length=320)
    role: str = Field(default=OrganizationRole.PARENT.value, max_length=50)
    status: str = Field(default=InviteStatus.PENDING.value, max_length=20)
    expires_at: datetime
    accepted_at: datetime | None = Field(default=None)
    created_by_user_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Expiry is derived, never stored: pending past expires_at."""
        return self.expires_at <= (now or utc_now())

    @property
    def effective_status(self) -> str:
        """Stored status, reporting pending-but-expired invites as expired."""
        if self.status == InviteStatus.PENDING.value and self.is_expired():
            return "expired"
        return self.status


class Parent(OrganizationScopedModel, table=True):
    """Parent profile within an organization's directory.

    May be created by an admin before the parent accepts an invite; acceptance
    then links the existing record instead of creating a duplicate.
    """

    __tablename__ = "parents"

    user_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str | None = Field(default=None, max_length=320, index=True)
    relationship: str | None = Field(default=None, max_length=100)
    student_name: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)
