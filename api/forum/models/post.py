"""
Post model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from forum.models.enums import PostType

if TYPE_CHECKING:
    from forum.models.topic import Topic
    from forum.models.user import User


class Post(SQLModel, table=True):
    """Post table - a single message within a topic."""
    __tablename__ = "post"

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    post_number: int  # Sequential number within the topic
    sort_order: int  # Display position within the topic
    raw: str
    post_type: int = Field(default=PostType.REGULAR.value)
    like_count: int = Field(default=0)
    version: int = Field(default=1)
    last_version_at: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None

    # Relationships
    topic: "Topic" = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    user: "User" = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def archetype(self) -> str:
        return self.topic.archetype

    @property
    def regular(self) -> bool:
        return self.post_type == PostType.REGULAR.value
