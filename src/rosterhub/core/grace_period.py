"""Subscription grace-period rules.

Pure functions mapping a subscription snapshot to lifecycle flags. No I/O:
safe to call on every request and from the scheduled deletion sweep.

Lifecycle:
    active/trialing --(cancel at period end)--> canceling
    canceling --(period ends, subscription deleted)--> canceled
    canceled: read-only for GRACE_PERIOD_DAYS, then blocked and eligible for deletion

Timestamps are naive UTC, matching how they are stored. Aware datetimes are
converted to naive UTC before comparison.

A ``grace_period_ends_at`` string that cannot be parsed is treated as already
expired. This fail-safe is intentional: a corrupt billing record must never
grant indefinite access.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from src.rosterhub.models.base import utc_now
from src.rosterhub.models.enums import SubscriptionStatus

GRACE_PERIOD_DAYS = 30

# Statuses that always grant access. "canceling" is still paid through period end.
ACCESS_GRANTING_STATUSES = frozenset(
    {
        SubscriptionStatus.ACTIVE.value,
        SubscriptionStatus.TRIALING.value,
        SubscriptionStatus.CANCELING.value,
    }
)

_ONE_DAY_SECONDS = timedelta(days=1).total_seconds()


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """Read-only view of an organization's subscription."""

    status: str
    grace_period_ends_at: datetime | str | None = None
    current_period_end: datetime | str | None = None


@dataclass(frozen=True)
class GracePeriodInfo:
    """Lifecycle flags derived from a SubscriptionSnapshot. Never persisted."""

    is_in_grace_period: bool = False
    is_grace_period_expired: bool = False
    days_remaining: int = 0
    grace_period_ends_at: datetime | None = None
    is_canceling: bool = False
    is_canceled: bool = False
    is_read_only: bool = False


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse a stored timestamp. Returns None when absent or unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _to_naive_utc(parsed)


def compute_grace_period_info(
    snapshot: SubscriptionSnapshot | None,
    now: datetime | None = None,
) -> GracePeriodInfo:
    """Compute grace-period flags for a subscription.

    Args:
        snapshot: The subscription, or None when the organization has none.
        now: Evaluation time (naive UTC). Defaults to the current time.

    Returns:
        GracePeriodInfo. ``is_in_grace_period`` and ``is_grace_period_expired``
        are mutually exclusive and both False unless the status is canceled.
    """
    if snapshot is None:
        return GracePeriodInfo()

    if snapshot.status == SubscriptionStatus.CANCELING.value:
        return GracePeriodInfo(is_canceling=True)

    if snapshot.status != SubscriptionStatus.CANCELED.value:
        return GracePeriodInfo()

    current = _to_naive_utc(now) if now is not None else utc_now()
    ends_at = _parse_timestamp(snapshot.grace_period_ends_at)

    # Absent or unparseable end date on a canceled subscription counts as expired.
    if ends_at is None or current >= ends_at:
        return GracePeriodInfo(
            is_grace_period_expired=True,
            grace_period_ends_at=ends_at,
            is_canceled=True,
        )

    remaining_seconds = (ends_at - current).total_seconds()
    return GracePeriodInfo(
        is_in_grace_period=True,
        days_remaining=math.ceil(remaining_seconds / _ONE_DAY_SECONDS),
        grace_period_ends_at=ends_at,
        is_canceled=True,
        is_read_only=True,
    )


def calculate_grace_period_end(now: datetime | None = None) -> str:
    """Return the grace-period end for a subscription canceled at ``now``.

    Called once, when a subscription transitions into canceled.

    Returns:
        ISO-8601 timestamp GRACE_PERIOD_DAYS after ``now`` (naive UTC).
    """
    start = _to_naive_utc(now) if now is not None else utc_now()
    return (start + timedelta(days=GRACE_PERIOD_DAYS)).isoformat()


def should_block_access(
    snapshot: SubscriptionSnapshot | None,
    now: datetime | None = None,
) -> bool:
    """Decide whether all access (reads included) must be refused.

    Only a known-good status, or a canceled subscription still inside its
    grace period, grants access. Everything else blocks.
    """
    if snapshot is None:
        return True
    if snapshot.status in ACCESS_GRANTING_STATUSES:
        return False
    if snapshot.status == SubscriptionStatus.CANCELED.value:
        return compute_grace_period_info(snapshot, now).is_grace_period_expired
    return True


def is_org_read_only(
    snapshot: SubscriptionSnapshot | None,
    now: datetime | None = None,
) -> bool:
    """Decide whether mutating requests must be refused while reads stay allowed."""
    if snapshot is None:
        return False
    return compute_grace_period_info(snapshot, now).is_read_only
