"""API router aggregator."""

from fastapi import APIRouter

from app.api.v1.endpoints import comments, posts, users
from app.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(comments.router)

__all__ = ["api_router"]
