"""
ScheduledJob, EmailLog and RateLimitEvent models - bookkeeping for background work.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import Column, JSON
from forum.models.enums import JobStatus


class ScheduledJob(SQLModel, table=True):
    """ScheduledJob table - a named background job and its arguments."""
    __tablename__ = "scheduled_job"

    id: Optional[int] = Field(default=None, primary_key=True)
    job_name: str = Field(index=True)
    args: dict = Field(default_factory=dict, sa_column=Column(JSON))
    run_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    status: str = Field(default=JobStatus.PENDING.value, index=True)
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None


class EmailLog(SQLModel, table=True):
    """EmailLog table - outgoing emails handed to the mailer."""
    __tablename__ = "email_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    email_type: str
    to_address: str
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")
    post_id: Optional[int] = Field(default=None, foreign_key="post.id")
    invite_id: Optional[int] = Field(default=None, foreign_key="invite.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class RateLimitEvent(SQLModel, table=True):
    """RateLimitEvent table - one row per limited action performed."""
    __tablename__ = "rate_limit_event"

    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
