"""
UserAction model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class UserAction(SQLModel, table=True):
    """UserAction table - a user's activity stream."""
    __tablename__ = "user_action"

    id: Optional[int] = Field(default=None, primary_key=True)
    action_type: int
    user_id: int = Field(foreign_key="user.id", index=True)
    acting_user_id: Optional[int] = Field(default=None, foreign_key="user.id")
    target_topic_id: Optional[int] = Field(default=None, foreign_key="topic.id")
    target_post_id: Optional[int] = Field(default=None, foreign_key="post.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
