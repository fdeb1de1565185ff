"""Temporal Workflows - Re-exports for worker registration."""

from src.rosterhub.temporal.workflows.grace_period_sweep import (
    GracePeriodSweepInput,
    GracePeriodSweepWorkflow,
)
from src.rosterhub.temporal.workflows.organization_deletion import (
    OrganizationDeletionWorkflow,
    deletion_workflow_id,
)

__all__ = [
    "GracePeriodSweepInput",
    "GracePeriodSweepWorkflow",
    "OrganizationDeletionWorkflow",
    "deletion_workflow_id",
]
