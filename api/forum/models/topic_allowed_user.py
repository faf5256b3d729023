"""
TopicAllowedUser model - junction table for private message participants.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forum.models.user import User
    from forum.models.topic import Topic


class TopicAllowedUser(SQLModel, table=True):
    """TopicAllowedUser junction table - users allowed to see a private message."""
    __tablename__ = "topic_allowed_user"

    topic_id: int = Field(foreign_key="topic.id", primary_key=True)
    user_id: int = Field(foreign_key="user.id", primary_key=True)

    # Relationships
    topic: "Topic" = Relationship(back_populates="topic_allowed_users")
    user: "User" = Relationship()
