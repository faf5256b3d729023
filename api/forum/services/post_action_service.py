"""
Post action service - likes and bookmarks.
"""
import logging
from typing import Optional

from sqlmodel import Session, select

from forum.models.models import (
    NotificationType,
    Post,
    PostAction,
    PostActionType,
    User,
    UserActionType,
)
from forum.services import notification_service, user_action_service

logger = logging.getLogger(__name__)


def _find(session: Session, user: User, post: Post, action_type: int) -> Optional[PostAction]:
    return session.exec(
        select(PostAction).where(
            PostAction.post_id == post.id,
            PostAction.user_id == user.id,
            PostAction.post_action_type_id == int(action_type),
        )
    ).first()


def act(session: Session, user: User, post: Post, action_type: int = PostActionType.LIKE) -> PostAction:
    """Record a like or bookmark; acting twice is a no-op."""
    existing = _find(session, user, post, action_type)
    if existing is not None:
        return existing

    action = PostAction(post_id=post.id, user_id=user.id, post_action_type_id=int(action_type))
    session.add(action)

    if int(action_type) == PostActionType.LIKE:
        post.like_count += 1
        topic = post.topic
        topic.like_count += 1
        session.add(post)
        session.add(topic)
        user_action_service.log_action(
            session, UserActionType.LIKE, user.id, topic_id=post.topic_id, post_id=post.id
        )
        user_action_service.log_action(
            session, UserActionType.WAS_LIKED, post.user_id,
            acting_user_id=user.id, topic_id=post.topic_id, post_id=post.id
        )
        if post.user_id != user.id:
            notification_service.notify(
                session, post.user_id, NotificationType.LIKED,
                topic=topic, post_number=post.post_number, acting_user=user
            )
    else:
        user_action_service.log_action(
            session, UserActionType.BOOKMARK, user.id, topic_id=post.topic_id, post_id=post.id
        )

    session.commit()
    session.refresh(action)
    return action


def remove_act(session: Session, user: User, post: Post, action_type: int = PostActionType.LIKE) -> bool:
    """Undo a like or bookmark. Returns False when there was nothing to undo."""
    existing = _find(session, user, post, action_type)
    if existing is None:
        return False

    session.delete(existing)
    if int(action_type) == PostActionType.LIKE:
        post.like_count = max(post.like_count - 1, 0)
        topic = post.topic
        topic.like_count = max(topic.like_count - 1, 0)
        session.add(post)
        session.add(topic)
        user_action_service.remove_action(session, UserActionType.LIKE, user.id, post_id=post.id)
        user_action_service.remove_action(session, UserActionType.WAS_LIKED, post.user_id, post_id=post.id)
    else:
        user_action_service.remove_action(session, UserActionType.BOOKMARK, user.id, post_id=post.id)

    session.commit()
    return True
