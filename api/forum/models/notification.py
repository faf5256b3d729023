"""
Notification model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import Column, JSON

if TYPE_CHECKING:
    from forum.models.user import User


class Notification(SQLModel, table=True):
    """Notification table - alerts shown to a user."""
    __tablename__ = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    notification_type: int
    user_id: int = Field(foreign_key="user.id", index=True)
    topic_id: Optional[int] = Field(default=None, foreign_key="topic.id")
    post_number: Optional[int] = None
    data: dict = Field(default_factory=dict, sa_column=Column(JSON))
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    user: "User" = Relationship(back_populates="notifications")
