"""
TopicRevision model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import Column, JSON

if TYPE_CHECKING:
    from forum.models.topic import Topic


class TopicRevision(SQLModel, table=True):
    """TopicRevision table - one row per topic version after the first."""
    __tablename__ = "topic_revision"

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", index=True)
    number: int  # The version this revision produced
    modifications: dict = Field(default_factory=dict, sa_column=Column(JSON))  # field -> [old, new]
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    topic: "Topic" = Relationship(back_populates="revisions")
