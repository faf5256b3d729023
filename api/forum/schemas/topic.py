"""
Topic schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from forum.models.enums import Archetype, TopicStatus
from forum.schemas.post import PostResponse


class BasicUserResponse(BaseModel):
    """Minimal user info shown next to topics and posts."""
    id: int
    username: str
    name: Optional[str] = None

    class Config:
        from_attributes = True


class TopicResponse(BaseModel):
    """Topic response schema."""
    id: int
    title: str
    fancy_title: str
    slug: str
    relative_url: str
    archetype: str
    user_id: Optional[int] = None
    category_id: Optional[int] = None
    posts_count: int = 0
    highest_post_number: int = 0
    like_count: int = 0
    star_count: int = 0
    views: int = 0
    visible: bool = True
    closed: bool = False
    archived: bool = False
    pinned_at: Optional[datetime] = None
    bumped_at: Optional[datetime] = None
    last_posted_at: Optional[datetime] = None
    last_post_user_id: Optional[int] = None
    featured_user_ids: List[int] = []
    version: int = 1
    meta_data: Optional[Dict[str, Any]] = None
    auto_close_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TopicDetailResponse(TopicResponse):
    """Topic with its posts and participants."""
    posts: List[PostResponse] = []
    allowed_users: List[BasicUserResponse] = []


class TopicsResponse(BaseModel):
    """Response schema for topic lists."""
    topics: List[TopicResponse]


class CreateTopicRequest(BaseModel):
    """Request schema for creating a topic along with its first post."""
    title: str
    raw: str = Field(..., min_length=1)
    category_id: Optional[int] = None
    archetype: Archetype = Archetype.REGULAR
    target_usernames: List[str] = []
    auto_close_days: Optional[float] = None
    meta_data: Optional[Dict[str, Any]] = None


class UpdateTopicRequest(BaseModel):
    """Request schema for updating a topic. Only provided fields change."""
    title: Optional[str] = None
    category: Optional[str] = None  # Category name, empty string removes the category
    auto_close_days: Optional[float] = None
    clear_auto_close: bool = False
    meta_data: Optional[Dict[str, Any]] = None


class UpdateStatusRequest(BaseModel):
    """Request schema for toggling a topic status."""
    status: TopicStatus
    enabled: bool


class StarRequest(BaseModel):
    starred: bool


class InviteRequest(BaseModel):
    """Request schema for inviting a user or an email address."""
    username_or_email: str


class InviteResponse(BaseModel):
    success: bool
    invite_key: Optional[str] = None


class MovePostsRequest(BaseModel):
    """Request schema for moving posts to a new or an existing topic."""
    post_ids: List[int]
    title: Optional[str] = None
    destination_topic_id: Optional[int] = None


class SimilarTopicsResponse(BaseModel):
    topics: List[TopicResponse]
