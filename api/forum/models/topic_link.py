"""
TopicLink model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from forum.models.topic import Topic


class TopicLink(SQLModel, table=True):
    """TopicLink table - a url mentioned in one of the topic's posts."""
    __tablename__ = "topic_link"

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", index=True)
    post_id: int = Field(foreign_key="post.id")
    user_id: int = Field(foreign_key="user.id")
    url: str
    domain: str
    internal: bool = Field(default=False)  # Points back at this forum
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    topic: "Topic" = Relationship(back_populates="topic_links")
