"""
User model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from forum.models.topic_user import TopicUser
    from forum.models.user_action import UserAction
    from forum.models.notification import Notification


class User(SQLModel, table=True):
    """User table - stores forum members."""
    __tablename__ = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    name: Optional[str] = None
    admin: bool = Field(default=False)
    moderator: bool = Field(default=False)
    email_private_messages: bool = Field(default=True)  # Email me when someone messages me
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    topic_users: List["TopicUser"] = Relationship(back_populates="user")
    user_actions: List["UserAction"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "UserAction.user_id"}
    )
    notifications: List["Notification"] = Relationship(back_populates="user")

    @property
    def staff(self) -> bool:
        return bool(self.admin or self.moderator)
