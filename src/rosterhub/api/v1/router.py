from fastapi import APIRouter

from src.rosterhub.api.v1 import organizations, parent_invites, webhooks

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(parent_invites.public_router)
api_router.include_router(parent_invites.router)
api_router.include_router(organizations.router)
api_router.include_router(webhooks.router)
