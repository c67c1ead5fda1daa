"""Main API router aggregation."""

from fastapi import APIRouter

from social_api.api.auth import router as auth_router
from social_api.api.posts import router as posts_router
from social_api.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/v1")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(posts_router)
