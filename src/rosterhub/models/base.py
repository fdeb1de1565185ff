from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    Columns are TIMESTAMP WITHOUT TIME ZONE; every stored time is UTC by
    convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)


class OrganizationScopedModel(SQLModel):
    """Primary key and owner column shared by every organization-owned table.

    Rows of these tables are removed by the organization deletion cascade.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(foreign_key="organizations.id", index=True)
