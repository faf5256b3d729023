"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from forum.api.v1.endpoints import topics, posts

api_router = APIRouter()

# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(topics.router)
api_router.include_router(posts.router)
