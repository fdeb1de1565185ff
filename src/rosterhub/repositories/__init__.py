"""Repository layer - data access only; services own transactions."""

from src.rosterhub.repositories.base import BaseRepository
from src.rosterhub.repositories.organization import OrganizationRepository, SubscriptionRepository
from src.rosterhub.repositories.parent import ParentRepository
from src.rosterhub.repositories.parent_invite import InviteState, ParentInviteRepository
from src.rosterhub.repositories.role import RoleRepository
from src.rosterhub.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "InviteState",
    "OrganizationRepository",
    "ParentInviteRepository",
    "ParentRepository",
    "RoleRepository",
    "SubscriptionRepository",
    "UserRepository",
]
