"""Database models.

Identity (users) and the organization tenant root live alongside every
organization-scoped collection in one schema; isolation is by
``organization_id``.
"""

from src.rosterhub.models.content import (
    AcademicSchedule,
    Alumni,
    Announcement,
    Competition,
    CompetitionPoint,
    Donation,
    Event,
    EventRsvp,
    Form,
    FormDocument,
    FormSubmission,
    Member,
    Notification,
    NotificationPreference,
    OrganizationInvite,
    PhilanthropyEvent,
    Record,
    ScheduleFile,
)
from src.rosterhub.models.enums import (
    InviteStatus,
    OrganizationRole,
    RoleGrantStatus,
    SubscriptionStatus,
)
from src.rosterhub.models.organization import (
    Organization,
    OrganizationSubscription,
    UserOrganizationRole,
)
from src.rosterhub.models.parent import Parent, ParentInvite
from src.rosterhub.models.user import User

__all__ = [
    # Enums
    "InviteStatus",
    "OrganizationRole",
    "RoleGrantStatus",
    "SubscriptionStatus",
    # Identity and tenant root
    "Organization",
    "OrganizationSubscription",
    "User",
    "UserOrganizationRole",
    # Parents
    "Parent",
    "ParentInvite",
    # Organization-scoped collections
    "AcademicSchedule",
    "Alumni",
    "Announcement",
    "Competition",
    "CompetitionPoint",
    "Donation",
    "Event",
    "EventRsvp",
    "Form",
    "FormDocument",
    "FormSubmission",
    "Member",
    "Notification",
    "NotificationPreference",
    "OrganizationInvite",
    "PhilanthropyEvent",
    "Record",
    "ScheduleFile",
]
