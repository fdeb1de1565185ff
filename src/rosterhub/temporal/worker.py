"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.rosterhub.temporal.worker                         # all workloads
    python -m src.rosterhub.temporal.worker --workload organization # organization queues
    python -m src.rosterhub.temporal.worker --workload jobs         # jobs queue + schedule
"""

import argparse
import asyncio
from collections.abc import Callable, Sequence
from typing import Any

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.db import dispose_engine
from src.rosterhub.core.logging import get_logger, setup_logging
from src.rosterhub.temporal.activities import (
    cancel_organization_subscription,
    list_organizations_pending_deletion,
    purge_organization,
)
from src.rosterhub.temporal.routing import QueueKind, task_queue_name
from src.rosterhub.temporal.schedules import ensure_grace_period_sweep_schedule
from src.rosterhub.temporal.workflows import GracePeriodSweepWorkflow, OrganizationDeletionWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="RosterHub Temporal worker")
    parser.add_argument(
        "--workload",
        choices=["organization", "jobs", "all"],
        default="all",
        help="Worker workload type (default: all, for development)",
    )
    return parser.parse_args()


def organization_task_queues() -> list[str]:
    settings = get_settings()
    return [
        task_queue_name(settings.temporal_queue_prefix, QueueKind.ORGANIZATION, shard)
        for shard in range(settings.temporal_queue_shards)
    ]


def jobs_task_queue() -> str:
    return task_queue_name(get_settings().temporal_queue_prefix, QueueKind.JOBS, 0)


def create_worker(
    client: Client,
    task_queue: str,
    workflows: Sequence[type],
    activities: Sequence[Callable[..., Any]],
    *,
    max_concurrent_activities: int,
) -> Worker:
    return Worker(
        client,
        task_queue=task_queue,
        workflows=list(workflows),
        activities=list(activities),
        max_concurrent_activities=max_concurrent_activities,
    )


async def run_organization_workers(client: Client) -> None:
    """One worker per organization shard.

    Purges are long, write-heavy transactions; concurrency stays low.
    """
    workers = [
        create_worker(
            client,
            tq,
            workflows=[OrganizationDeletionWorkflow],
            activities=[cancel_organization_subscription, purge_organization],
            max_concurrent_activities=5,
        )
        for tq in organization_task_queues()
    ]
    logger.info("Starting organization workers", count=len(workers))
    await asyncio.gather(*(w.run() for w in workers))


async def run_jobs_worker(client: Client) -> None:
    await ensure_grace_period_sweep_schedule(client)
    worker = create_worker(
        client,
        jobs_task_queue(),
        workflows=[GracePeriodSweepWorkflow],
        activities=[list_organizations_pending_deletion],
        max_concurrent_activities=10,
    )
    logger.info("Starting jobs worker", task_queue=jobs_task_queue())
    await worker.run()


def create_health_app(workload: str, task_queues: list[str]) -> FastAPI:
    """Lightweight liveness endpoint for container probes."""
    health_app = FastAPI(title="RosterHub Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str | list[str]]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "workload": workload,
            "task_queues": task_queues,
        }

    return health_app


async def run_health_server(
    workload: str, task_queues: list[str], port: int = WORKER_HEALTH_PORT
) -> None:
    config = uvicorn.Config(
        create_health_app(workload, task_queues),
        host="0.0.0.0",
        port=port,
        log_level="warning",
    )
    await uvicorn.Server(config).serve()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    client = await Client.connect(
        settings.temporal_host,
        namespace=settings.temporal_namespace,
    )

    task_queues: list[str] = []
    runners = []
    if args.workload in ("organization", "all"):
        task_queues.extend(organization_task_queues())
        runners.append(run_organization_workers(client))
    if args.workload in ("jobs", "all"):
        task_queues.append(jobs_task_queue())
        runners.append(run_jobs_worker(client))

    logger.info("Starting worker", workload=args.workload, task_queues=task_queues)
    try:
        await asyncio.gather(run_health_server(args.workload, task_queues), *runners)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
