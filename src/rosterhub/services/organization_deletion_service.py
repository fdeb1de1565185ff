"""Organization teardown after the subscription grace period expires.

Order of operations:

1. Cancel the Stripe subscription, if one is on file. "Already canceled"
   and "not found" count as success. Any other failure halts the deletion
   before a single row is touched.
2. Delete every organization-scoped table, children before parents, each
   in its own transaction. A failed table is logged and skipped.
3. Delete the organization row. Only this step decides overall success; if
   a child table failed above, its foreign key keeps the organization alive
   and the whole purge can be re-run.

Re-running is always safe: tables already emptied delete zero rows.
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.rosterhub.core.logging import get_logger
from src.rosterhub.core.providers.payments import (
    CancellationOutcome,
    CancellationResult,
    PaymentGateway,
)
from src.rosterhub.models import (
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
    Organization,
    OrganizationInvite,
    OrganizationSubscription,
    Parent,
    ParentInvite,
    PhilanthropyEvent,
    Record,
    ScheduleFile,
    UserOrganizationRole,
)
from src.rosterhub.repositories import SubscriptionRepository

logger = get_logger(__name__)

# Children before the rows they reference. The organization row goes last
# and is not listed here.
DELETION_ORDER: tuple[type[SQLModel], ...] = (
    CompetitionPoint,
    Competition,
    Member,
    Alumni,
    EventRsvp,
    Event,
    Announcement,
    Donation,
    Record,
    PhilanthropyEvent,
    Notification,
    NotificationPreference,
    OrganizationInvite,
    ParentInvite,
    Parent,
    UserOrganizationRole,
    OrganizationSubscription,
    FormSubmission,
    FormDocument,
    Form,
    ScheduleFile,
    AcademicSchedule,
)


@dataclass
class PurgeResult:
    deleted: bool
    rows_deleted: dict[str, int] = field(default_factory=dict)
    failed_collections: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass
class OrganizationDeletionResult:
    deleted: bool
    halted: bool = False
    cancellation: CancellationResult | None = None
    purge: PurgeResult | None = None
    error: str | None = None


class OrganizationDeletionService:
    def __init__(self, session: AsyncSession, payment_gateway: PaymentGateway):
        self.session = session
        self.payment_gateway = payment_gateway
        self.subscription_repo = SubscriptionRepository(session)

    async def cancel_payment_subscription(self, organization_id: UUID) -> CancellationResult:
        """Stop billing for the organization.

        No subscription row, or a row without a Stripe id, needs no call and
        is reported as NOT_FOUND.
        """
        subscription = await self.subscription_repo.get_by_organization(organization_id)
        if subscription is None or not subscription.stripe_subscription_id:
            logger.info(
                "No payment subscription on file",
                organization_id=str(organization_id),
            )
            return CancellationResult(outcome=CancellationOutcome.NOT_FOUND)

        result = await self.payment_gateway.cancel_subscription(
            subscription.stripe_subscription_id
        )
        logger.info(
            "Payment subscription cancellation",
            organization_id=str(organization_id),
            subscription_id=subscription.stripe_subscription_id,
            outcome=result.outcome.value,
        )
        return result

    async def purge_organization(self, organization_id: UUID) -> PurgeResult:
        """Hard-delete every organization-scoped row, then the organization."""
        result = PurgeResult(deleted=False)

        for model in DELETION_ORDER:
            table = model.__tablename__
            try:
                scoped = delete(model).where(
                    model.organization_id == organization_id  # type: ignore[attr-defined]
                )
                outcome = await self.session.execute(scoped)
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                result.failed_collections.append(table)
                logger.error(
                    "Organization table delete failed",
                    organization_id=str(organization_id),
                    table=table,
                    error=str(e),
                )
                continue
            result.rows_deleted[table] = outcome.rowcount  # type: ignore[attr-defined]

        try:
            outcome = await self.session.execute(
                delete(Organization).where(
                    Organization.id == organization_id  # type: ignore[arg-type]
                )
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            result.error = str(e)
            logger.error(
                "Organization row delete failed",
                organization_id=str(organization_id),
                failed_collections=result.failed_collections,
                error=str(e),
            )
            return result

        org_table = Organization.__tablename__
        result.rows_deleted[org_table] = outcome.rowcount  # type: ignore[attr-defined]
        result.deleted = True
        logger.info(
            "Organization purged",
            organization_id=str(organization_id),
            rows_deleted=sum(result.rows_deleted.values()),
            failed_collections=result.failed_collections,
        )
        return result

    async def delete_organization(self, organization_id: UUID) -> OrganizationDeletionResult:
        """Cancel billing, then purge. Never deletes data while billing may continue."""
        cancellation = await self.cancel_payment_subscription(organization_id)
        if not cancellation.safe_to_proceed:
            logger.error(
                "Organization deletion halted, payment cancellation failed",
                organization_id=str(organization_id),
                error=cancellation.error,
            )
            return OrganizationDeletionResult(
                deleted=False,
                halted=True,
                cancellation=cancellation,
                error=cancellation.error or "Payment cancellation failed",
            )

        purge = await self.purge_organization(organization_id)
        return OrganizationDeletionResult(
            deleted=purge.deleted,
            cancellation=cancellation,
            purge=purge,
            error=purge.error,
        )
