"""
Rate limiter for user actions, backed by the rate_limit_event table.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session, select

from forum.core.config import settings
from forum.core.exceptions import RateLimitExceeded
from forum.models.models import RateLimitEvent, User

logger = logging.getLogger(__name__)

ONE_DAY = 24 * 60 * 60


class RateLimiter:
    """
    Allows a user to perform an action at most ``max_count`` times per
    ``secs`` seconds.

    ``performed()`` records an action (raising when the window is full) and
    ``rollback()`` forgets the most recent one, e.g. when a star is removed.
    Staff and disabled rate limits are never limited.
    """

    def __init__(self, session: Session, user: Optional[User], key: str, max_count: int, secs: int):
        self.session = session
        self.user = user
        self.max_count = max_count
        self.secs = secs
        user_part = user.id if user is not None else "anon"
        self.key = f"rate-limit:{user_part}:{key}"

    def rate_unlimited(self) -> bool:
        return not settings.rate_limits_enabled or (self.user is not None and self.user.staff)

    def _recent_events(self):
        window_start = datetime.utcnow() - timedelta(seconds=self.secs)
        return self.session.exec(
            select(RateLimitEvent).where(
                RateLimitEvent.key == self.key,
                RateLimitEvent.created_at >= window_start,
            ).order_by(RateLimitEvent.created_at, RateLimitEvent.id)  # type: ignore[arg-type]
        ).all()

    def can_perform(self) -> bool:
        if self.rate_unlimited():
            return True
        return len(self._recent_events()) < self.max_count

    def performed(self) -> None:
        if self.rate_unlimited():
            return

        events = self._recent_events()
        if len(events) >= self.max_count:
            oldest = events[0].created_at
            available_in = int((oldest + timedelta(seconds=self.secs) - datetime.utcnow()).total_seconds()) + 1
            logger.warning(f"Rate limit hit for {self.key}")
            raise RateLimitExceeded(self.key, max(available_in, 1))

        self.session.add(RateLimitEvent(key=self.key))

    def rollback(self) -> None:
        if self.rate_unlimited():
            return

        latest = self.session.exec(
            select(RateLimitEvent)
            .where(RateLimitEvent.key == self.key)
            .order_by(RateLimitEvent.created_at.desc(), RateLimitEvent.id.desc())  # type: ignore[attr-defined]
        ).first()
        if latest is not None:
            self.session.delete(latest)


def favorite_limiter(session: Session, user: User) -> RateLimiter:
    """Limits how many topics a user can star per day."""
    return RateLimiter(session, user, "starred", settings.max_favorites_per_day, ONE_DAY)


def topic_limiter(session: Session, user: User) -> RateLimiter:
    """Limits how many topics a user can create per day."""
    return RateLimiter(session, user, "create_topic", settings.max_topics_per_day, ONE_DAY)
