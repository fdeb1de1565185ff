"""Parent invite schemas."""

import re
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

# Control characters and angle brackets are never valid in a display name.
_UNSAFE_NAME_CHARS = re.compile(r"[\x00-\x1f\x7f<>]")


MAX_EMAIL_LENGTH = 320


def _normalize_email(value: object) -> object:
    if not isinstance(value, str):
        return value
    value = value.strip().lower()
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValueError(f"Email must be {MAX_EMAIL_LENGTH} characters or fewer")
    return value


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Value is required")
    if _UNSAFE_NAME_CHARS.search(value):
        raise ValueError("Name contains invalid characters")
    return value


class ParentInviteAcceptRequest(BaseModel):
    """Unauthenticated invite redemption with registration details."""

    code: str = Field(min_length=1, max_length=200)
    email: EmailStr
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class ParentInviteAcceptResponse(BaseModel):
    success: bool = True
    parent_id: UUID
    user_id: UUID


class ParentInviteCreateRequest(BaseModel):
    email: EmailStr | None = None
    role: Literal["parent"] = "parent"

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v) or None


class ParentInviteRead(BaseModel):
    """Admin view of an invite. ``status`` reports expired pending invites as expired."""

    id: UUID
    organization_id: UUID
    code: str
    email: str | None
    role: str
    status: str
    expires_at: datetime
    accepted_at: datetime | None
    created_at: datetime
