"""
Notification service.
"""
from typing import Optional

from sqlmodel import Session

from forum.models.models import Notification, Topic, User


def notify(
    session: Session,
    user_id: int,
    notification_type: int,
    topic: Optional[Topic] = None,
    post_number: Optional[int] = None,
    acting_user: Optional[User] = None,
) -> Notification:
    """Create a notification about a topic for a user."""
    data = {}
    if topic is not None:
        data["topic_title"] = topic.title
    if acting_user is not None:
        data["display_username"] = acting_user.username

    notification = Notification(
        notification_type=int(notification_type),
        user_id=user_id,
        topic_id=topic.id if topic is not None else None,
        post_number=post_number,
        data=data,
    )
    session.add(notification)
    return notification
