"""
Post schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class PostResponse(BaseModel):
    """Post response schema."""
    id: int
    topic_id: int
    user_id: int
    post_number: int
    sort_order: int
    raw: str
    post_type: int
    like_count: int = 0
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreatePostRequest(BaseModel):
    """Request schema for replying to a topic."""
    topic_id: int
    raw: str = Field(..., min_length=1)


class RevisePostRequest(BaseModel):
    """Request schema for editing a post."""
    raw: str = Field(..., min_length=1)


class RevisePostResponse(BaseModel):
    post: PostResponse
    changed: bool
