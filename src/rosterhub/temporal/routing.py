"""Task queue routing.

Queue names are ``{prefix}.{kind}.{shard:02d}``. Organization workflows are
pinned to a shard by a stable hash of the organization id, so every
workflow for one organization lands on the same queue.
"""

import hashlib
from dataclasses import dataclass
from enum import StrEnum

from temporalio.common import Priority


class QueueKind(StrEnum):
    ORGANIZATION = "organization"  # Organization-scoped workflows (deletion)
    JOBS = "jobs"  # System-wide scheduled jobs (grace-period sweep)


@dataclass(frozen=True)
class TemporalRoute:
    namespace: str
    task_queue: str
    priority: Priority | None = None


def _stable_shard(key: str, shards: int) -> int:
    # hashlib, not hash(): must agree across processes.
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") % max(1, shards)


def task_queue_name(prefix: str, kind: QueueKind, shard: int) -> str:
    return f"{prefix}.{kind}.{shard:02d}"


def route_for_organization(
    *,
    organization_id: str,
    namespace: str,
    prefix: str,
    shards: int,
    kind: QueueKind = QueueKind.ORGANIZATION,
) -> TemporalRoute:
    shard = _stable_shard(organization_id, shards)
    return TemporalRoute(
        namespace=namespace,
        task_queue=task_queue_name(prefix, kind, shard),
        priority=Priority(fairness_key=organization_id),
    )


def route_for_system_job(
    *,
    namespace: str,
    prefix: str,
    kind: QueueKind = QueueKind.JOBS,
) -> TemporalRoute:
    """System jobs always use shard 00."""
    return TemporalRoute(namespace=namespace, task_queue=task_queue_name(prefix, kind, 0))
