"""Subscription status schemas."""

from datetime import datetime

from pydantic import BaseModel


class GracePeriodRead(BaseModel):
    is_in_grace_period: bool
    is_grace_period_expired: bool
    days_remaining: int
    grace_period_ends_at: datetime | None
    is_canceling: bool
    is_canceled: bool
    is_read_only: bool


class SubscriptionStatusResponse(BaseModel):
    """Billing state of an organization as seen by access control."""

    status: str | None
    current_period_end: datetime | None
    grace_period: GracePeriodRead
    should_block_access: bool
