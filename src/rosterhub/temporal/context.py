"""Organization context carried by every organization-scoped activity input."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class OrganizationCtx:
    """Built once in the workflow and passed unchanged to each activity.

    Keeps the organization id explicit in every activity signature, so an
    activity cannot silently act on the wrong organization.
    """

    organization_id: str

    @property
    def organization_uuid(self) -> UUID:
        return UUID(self.organization_id)
