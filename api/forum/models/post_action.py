"""
PostAction model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime


class PostAction(SQLModel, table=True):
    """PostAction table - likes and bookmarks on posts."""
    __tablename__ = "post_action"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", "post_action_type_id", name="uq_post_action_post_user_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    post_id: int = Field(foreign_key="post.id", index=True)
    user_id: int = Field(foreign_key="user.id")
    post_action_type_id: int
    created_at: datetime = Field(default_factory=datetime.utcnow)
