"""Organization (tenant root), subscription and role-grant models."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.rosterhub.models.base import utc_now
from src.rosterhub.models.enums import OrganizationRole, RoleGrantStatus, SubscriptionStatus

if TYPE_CHECKING:
    from src.rosterhub.core.grace_period import SubscriptionSnapshot


class Organization(SQLModel, table=True):
    """Tenant root. Owns every organization-scoped collection."""

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200, index=True)
    slug: str = Field(max_length=100, unique=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class OrganizationSubscription(SQLModel, table=True):
    """Billing state for an organization, kept in sync from Stripe webhooks."""

    __tablename__ = "organization_subscriptions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(foreign_key="organizations.id", unique=True, index=True)
    stripe_customer_id: str | None = Field(default=None, max_length=255)
    stripe_subscription_id: str | None = Field(default=None, max_length=255, index=True)
    status: str = Field(default=SubscriptionStatus.PENDING.value, max_length=50)
    current_period_end: datetime | None = Field(default=None)
    grace_period_ends_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_snapshot(self) -> "SubscriptionSnapshot":
        """Read-only view consumed by the grace-period rules."""
        from src.rosterhub.core.grace_period import SubscriptionSnapshot

        return SubscriptionSnapshot(
            status=self.status,
            grace_period_ends_at=self.grace_period_ends_at,
            current_period_end=self.current_period_end,
        )


class UserOrganizationRole(SQLModel, table=True):
    """A user's role grant in an organization. One row per (user, organization)."""

    __tablename__ = "user_organization_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_user_organization_roles_user_org"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    organization_id: UUID = Field(foreign_key="organizations.id", index=True)
    role: str = Field(default=OrganizationRole.ACTIVE_MEMBER.value, max_length=50)
    status: str = Field(default=RoleGrantStatus.ACTIVE.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
