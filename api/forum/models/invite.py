"""
Invite models.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
import uuid


class Invite(SQLModel, table=True):
    """Invite table - an email invitation to join the forum."""
    __tablename__ = "invite"

    id: Optional[int] = Field(default=None, primary_key=True)
    invite_key: str = Field(default_factory=lambda: uuid.uuid4().hex, unique=True)
    email: str = Field(index=True)
    invited_by_id: int = Field(foreign_key="user.id")
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")  # Set once redeemed
    redeemed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class TopicInvite(SQLModel, table=True):
    """TopicInvite junction table - topics an invite grants access to."""
    __tablename__ = "topic_invite"

    topic_id: int = Field(foreign_key="topic.id", primary_key=True)
    invite_id: int = Field(foreign_key="invite.id", primary_key=True)
