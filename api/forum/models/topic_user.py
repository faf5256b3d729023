"""
TopicUser model - per-user state for a topic.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from forum.models.user import User
    from forum.models.topic import Topic


class TopicUser(SQLModel, table=True):
    """TopicUser table - stars, reading progress and posting flags of a user in a topic."""
    __tablename__ = "topic_user"

    user_id: int = Field(foreign_key="user.id", primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", primary_key=True)
    starred: bool = Field(default=False)
    starred_at: Optional[datetime] = None
    unstarred_at: Optional[datetime] = None
    posted: bool = Field(default=False)
    last_read_post_number: Optional[int] = None
    seen_post_count: Optional[int] = None
    total_msecs_viewed: int = Field(default=0)
    last_visited_at: Optional[datetime] = None

    # Relationships
    user: "User" = Relationship(back_populates="topic_users")
    topic: "Topic" = Relationship(back_populates="topic_users")
