"""
Category model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from forum.models.user import User


class Category(SQLModel, table=True):
    """Category table for grouping topics."""
    __tablename__ = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    slug: str = Field(default="")
    user_id: int = Field(foreign_key="user.id")  # Creator
    topic_count: int = Field(default=0)  # Denormalized, kept by the topic service
    secure: bool = Field(default=False)  # Only staff can see topics in secure categories
    auto_close_days: Optional[float] = None  # Default auto-close for new topics
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    user: "User" = Relationship()
