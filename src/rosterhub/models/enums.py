"""Shared enums for models."""

from enum import Enum


class SubscriptionStatus(str, Enum):
    """Organization subscription status.

    Mirrors Stripe subscription statuses plus the local states
    ``canceling`` (cancellation scheduled at period end), ``pending``
    and ``pending_sales`` (checkout or sales-assisted setup not finished).
    """

    ACTIVE = "active"
    TRIALING = "trialing"
    CANCELING = "canceling"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PENDING = "pending"
    PENDING_SALES = "pending_sales"
    UNPAID = "unpaid"


class OrganizationRole(str, Enum):
    """User role within an organization."""

    ADMIN = "admin"
    ACTIVE_MEMBER = "active_member"
    ALUMNI = "alumni"
    PARENT = "parent"


class RoleGrantStatus(str, Enum):
    """Status of a user's role grant in an organization."""

    ACTIVE = "active"
    PENDING = "pending"
    REVOKED = "revoked"


class InviteStatus(str, Enum):
    """Stored parent invite status.

    Expiry is derived from ``expires_at`` and never stored.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"
