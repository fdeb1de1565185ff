"""Organization-scoped collections.

Every table here carries ``organization_id`` and is removed by the organization
deletion cascade. Foreign keys have no ON DELETE CASCADE: deletion order is
what keeps them satisfied.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlmodel import Field

from src.rosterhub.models.base import OrganizationScopedModel, utc_now


class OrganizationInvite(OrganizationScopedModel, table=True):
    """Multi-use member/alumni invite code."""

    __tablename__ = "organization_invites"

    code: str = Field(max_length=200, unique=True, index=True)
    role: str = Field(max_length=50)
    uses_remaining: int | None = Field(default=None)
    expires_at: datetime | None = Field(default=None)
    revoked_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class Member(OrganizationScopedModel, table=True):
    __tablename__ = "members"

    user_id: UUID | None = Field(default=None, foreign_key="users.id")
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str | None = Field(default=None, max_length=320)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)


class Alumni(OrganizationScopedModel, table=True):
    __tablename__ = "alumni"

    user_id: UUID | None = Field(default=None, foreign_key="users.id")
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    graduation_year: int | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)


class Event(OrganizationScopedModel, table=True):
    __tablename__ = "events"

    title: str = Field(max_length=200)
    starts_at: datetime
    ends_at: datetime | None = Field(default=None)
    location: str | None = Field(default=None, max_length=300)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)


class EventRsvp(OrganizationScopedModel, table=True):
    __tablename__ = "event_rsvps"

    event_id: UUID = Field(foreign_key="events.id", index=True)
    user_id: UUID = Field(foreign_key="users.id")
    status: str = Field(default="attending", max_length=20)
    created_at: datetime = Field(default_factory=utc_now)


class Announcement(OrganizationScopedModel, table=True):
    __tablename__ = "announcements"

    title: str = Field(max_length=200)
    body: str | None = Field(default=None)
    published_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    deleted_at: datetime | None = Field(default=None)


class Donation(OrganizationScopedModel, table=True):
    __tablename__ = "donations"

    donor_name: str | None = Field(default=None, max_length=200)
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    stripe_payment_intent_id: str | None = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)


class Record(OrganizationScopedModel, table=True):
    """Organization record book entry (team records, milestones)."""

    __tablename__ = "records"

    title: str = Field(max_length=200)
    value: str | None = Field(default=None, max_length=200)
    created_at: datetime = Field(default_factory=utc_now)


class PhilanthropyEvent(OrganizationScopedModel, table=True):
    __tablename__ = "philanthropy_events"

    title: str = Field(max_length=200)
    hours: Decimal | None = Field(default=None, max_digits=8, decimal_places=2)
    created_at: datetime = Field(default_factory=utc_now)


class Notification(OrganizationScopedModel, table=True):
    __tablename__ = "notifications"

    title: str = Field(max_length=200)
    body: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class NotificationPreference(OrganizationScopedModel, table=True):
    __tablename__ = "notification_preferences"

    user_id: UUID = Field(foreign_key="users.id")
    email_enabled: bool = Field(default=True)
    push_enabled: bool = Field(default=True)


class Competition(OrganizationScopedModel, table=True):
    __tablename__ = "competitions"

    name: str = Field(max_length=200)
    created_at: datetime = Field(default_factory=utc_now)


class CompetitionPoint(OrganizationScopedModel, table=True):
    __tablename__ = "competition_points"

    competition_id: UUID = Field(foreign_key="competitions.id", index=True)
    team_name: str = Field(max_length=200)
    points: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)


class Form(OrganizationScopedModel, table=True):
    __tablename__ = "forms"

    title: str = Field(max_length=200)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class FormDocument(OrganizationScopedModel, table=True):
    """Uploaded document attached to a form (or free-standing when form_id is null)."""

    __tablename__ = "form_documents"

    form_id: UUID | None = Field(default=None, foreign_key="forms.id")
    file_path: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utc_now)


class FormSubmission(OrganizationScopedModel, table=True):
    __tablename__ = "form_submissions"

    form_id: UUID = Field(foreign_key="forms.id", index=True)
    user_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)


class AcademicSchedule(OrganizationScopedModel, table=True):
    __tablename__ = "academic_schedules"

    user_id: UUID | None = Field(default=None, foreign_key="users.id")
    title: str = Field(max_length=200)
    created_at: datetime = Field(default_factory=utc_now)


class ScheduleFile(OrganizationScopedModel, table=True):
    __tablename__ = "schedule_files"

    schedule_id: UUID | None = Field(default=None, foreign_key="academic_schedules.id")
    file_path: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utc_now)
