"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, OrganizationFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.organization import OrganizationFactory, OrganizationSubscriptionFactory
from tests.factories.parent import ParentFactory, ParentInviteFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory, UserOrganizationRoleFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Organization
    "OrganizationFactory",
    "OrganizationSubscriptionFactory",
    # Users and roles
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
    "UserOrganizationRoleFactory",
    # Parents
    "ParentFactory",
    "ParentInviteFactory",
]
