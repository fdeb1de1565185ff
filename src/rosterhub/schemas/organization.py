"""Organization schemas."""

from uuid import UUID

from pydantic import BaseModel


class OrganizationDeleteResponse(BaseModel):
    deleted: bool = True
    organization_id: UUID
    subscription_outcome: str | None = None
