"""Temporal activities.

Activities are idempotent, open their own database session, and keep all
external calls (database, Stripe) out of workflow code.
"""

from src.rosterhub.temporal.activities.grace_period import (
    PendingDeletionOutput,
    list_organizations_pending_deletion,
)
from src.rosterhub.temporal.activities.organization import (
    PAYMENT_CANCELLATION_FAILED,
    PURGE_INCOMPLETE,
    CancelSubscriptionInput,
    CancelSubscriptionOutput,
    PurgeOrganizationInput,
    PurgeOrganizationOutput,
    cancel_organization_subscription,
    purge_organization,
)
from src.rosterhub.temporal.context import OrganizationCtx

__all__ = [
    "PAYMENT_CANCELLATION_FAILED",
    "PURGE_INCOMPLETE",
    "CancelSubscriptionInput",
    "CancelSubscriptionOutput",
    "OrganizationCtx",
    "PendingDeletionOutput",
    "PurgeOrganizationInput",
    "PurgeOrganizationOutput",
    "cancel_organization_subscription",
    "list_organizations_pending_deletion",
    "purge_organization",
]
