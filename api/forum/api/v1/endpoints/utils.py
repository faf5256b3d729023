"""
Utility functions for endpoint operations.
"""
from typing import Optional

from sqlmodel import Session

from forum.core.exceptions import AuthenticationError, NotFoundError
from forum.models.models import Post, Topic, User


def get_user_or_none(session: Session, user_id: Optional[int]) -> Optional[User]:
    """
    Load the acting user. Anonymous requests (no user_id) get None.

    Raises:
        NotFoundError: If user_id refers to no user
    """
    if user_id is None:
        return None
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def require_user(session: Session, user_id: Optional[int]) -> User:
    """Load the acting user for actions that need one."""
    if user_id is None:
        raise AuthenticationError("You need to be logged in to do that")
    return get_user_or_none(session, user_id)


def get_topic_or_404(session: Session, topic_id: int) -> Topic:
    topic = session.get(Topic, topic_id)
    if not topic:
        raise NotFoundError(f"Topic with id {topic_id} not found")
    return topic


def get_post_or_404(session: Session, post_id: int) -> Post:
    post = session.get(Post, post_id)
    if not post or post.deleted_at is not None:
        raise NotFoundError(f"Post with id {post_id} not found")
    return post
