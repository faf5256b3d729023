"""
TopicUser service - per-user state of a topic.
"""
from datetime import datetime
from typing import Optional, Union

from sqlmodel import Session

from forum.models.models import TopicUser, User


def _user_id(user: Union[User, int]) -> int:
    return user if isinstance(user, int) else user.id


def get(session: Session, user: Union[User, int], topic_id: int) -> Optional[TopicUser]:
    return session.get(TopicUser, (_user_id(user), topic_id))


def change(session: Session, user: Union[User, int], topic_id: int, **attrs) -> TopicUser:
    """Update (or create) the TopicUser row with the given attributes."""
    topic_user = get(session, user, topic_id)
    if topic_user is None:
        topic_user = TopicUser(user_id=_user_id(user), topic_id=topic_id)
    for name, value in attrs.items():
        setattr(topic_user, name, value)
    session.add(topic_user)
    return topic_user


def update_last_read(
    session: Session,
    user: Union[User, int],
    topic_id: int,
    post_number: int,
    msecs: int,
) -> TopicUser:
    """Record that a user has read a topic up to a post."""
    topic_user = get(session, user, topic_id)
    if topic_user is None:
        topic_user = TopicUser(user_id=_user_id(user), topic_id=topic_id)

    topic_user.last_read_post_number = max(topic_user.last_read_post_number or 0, post_number)
    topic_user.seen_post_count = max(topic_user.seen_post_count or 0, post_number)
    topic_user.total_msecs_viewed = (topic_user.total_msecs_viewed or 0) + max(msecs, 0)
    topic_user.last_visited_at = datetime.utcnow()
    session.add(topic_user)
    session.commit()
    return topic_user
