"""User and role-grant factories for test data generation."""

from polyfactory import Use

from src.rosterhub.core.security import hash_password
from src.rosterhub.models import OrganizationRole, RoleGrantStatus, User, UserOrganizationRole
from tests.factories.base import BaseFactory, generate_uuid, utc_now

DEFAULT_TEST_PASSWORD = "testpassword123"


class UserFactory(BaseFactory):
    __model__ = User

    id = Use(generate_uuid)
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    is_active = True
    email_verified = True
    email_verified_at = Use(utc_now)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def inactive(cls, **kwargs):
        return cls.build(is_active=False, **kwargs)


class UserOrganizationRoleFactory(BaseFactory):
    __model__ = UserOrganizationRole

    id = Use(generate_uuid)
    # FK fields - must be set explicitly
    user_id = None
    organization_id = None
    role = OrganizationRole.ACTIVE_MEMBER.value
    status = RoleGrantStatus.ACTIVE.value
    created_at = Use(utc_now)

    @classmethod
    def admin(cls, **kwargs):
        return cls.build(role=OrganizationRole.ADMIN.value, **kwargs)

    @classmethod
    def revoked(cls, **kwargs):
        return cls.build(status=RoleGrantStatus.REVOKED.value, **kwargs)
