"""Temporal schedule for the grace-period sweep."""

from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleSpec,
)

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.logging import get_logger
from src.rosterhub.temporal.routing import route_for_system_job
from src.rosterhub.temporal.workflows import GracePeriodSweepInput, GracePeriodSweepWorkflow

logger = get_logger(__name__)

GRACE_PERIOD_SWEEP_SCHEDULE_ID = "grace-period-sweep"


async def ensure_grace_period_sweep_schedule(client: Client) -> bool:
    """Create the sweep schedule if it does not exist yet.

    Returns:
        True if created, False if it already existed or sweeping is disabled
        (ORGANIZATION_DELETION_SCHEDULE unset).
    """
    settings = get_settings()
    if not settings.organization_deletion_schedule:
        logger.info("Grace-period sweep schedule disabled")
        return False

    route = route_for_system_job(
        namespace=settings.temporal_namespace,
        prefix=settings.temporal_queue_prefix,
    )
    sweep_input = GracePeriodSweepInput(
        namespace=settings.temporal_namespace,
        queue_prefix=settings.temporal_queue_prefix,
        queue_shards=settings.temporal_queue_shards,
    )

    try:
        await client.create_schedule(
            GRACE_PERIOD_SWEEP_SCHEDULE_ID,
            Schedule(
                action=ScheduleActionStartWorkflow(
                    GracePeriodSweepWorkflow.run,
                    sweep_input,
                    id=GRACE_PERIOD_SWEEP_SCHEDULE_ID,
                    task_queue=route.task_queue,
                ),
                spec=ScheduleSpec(cron_expressions=[settings.organization_deletion_schedule]),
            ),
        )
    except ScheduleAlreadyRunningError:
        return False

    logger.info(
        "Grace-period sweep schedule created",
        cron=settings.organization_deletion_schedule,
        task_queue=route.task_queue,
    )
    return True
