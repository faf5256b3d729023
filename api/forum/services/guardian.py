"""
Guardian - who may see and act on topics and posts.
"""
from typing import Optional

from forum.core.exceptions import AuthorizationError
from forum.models.models import Post, Topic, User


def is_staff(user: Optional[User]) -> bool:
    return user is not None and user.staff


def is_allowed_user(user: Optional[User], topic: Topic) -> bool:
    if user is None:
        return False
    return any(allowed.id == user.id for allowed in topic.allowed_users)


def can_see(user: Optional[User], topic: Optional[Topic]) -> bool:
    """
    Whether a user (None for anonymous) may see a topic.

    Deleted topics are staff only, private messages are limited to their
    participants (and admins), secure categories are staff only.
    """
    if topic is None:
        return False
    if topic.deleted_at is not None:
        return is_staff(user)
    if topic.private_message:
        if user is None:
            return False
        return user.admin or is_allowed_user(user, topic)
    if topic.category is not None and topic.category.secure:
        return is_staff(user)
    return True


def can_moderate(user: Optional[User], topic: Optional[Topic]) -> bool:
    return topic is not None and is_staff(user)


def can_move_posts(user: Optional[User], topic: Optional[Topic]) -> bool:
    return can_moderate(user, topic)


def can_invite_to(user: Optional[User], topic: Optional[Topic]) -> bool:
    if user is None or topic is None or not can_see(user, topic):
        return False
    if is_staff(user):
        return True
    if topic.private_message:
        return is_allowed_user(user, topic)
    return topic.user_id == user.id


def can_create_post(user: Optional[User], topic: Optional[Topic]) -> bool:
    if user is None or not can_see(user, topic):
        return False
    if is_staff(user):
        return True
    return not (topic.closed or topic.archived)


def can_edit_post(user: Optional[User], post: Post) -> bool:
    if user is None:
        return False
    if is_staff(user):
        return True
    return post.user_id == user.id and not post.topic.archived


def ensure_can_see(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_see(user, topic):
        raise AuthorizationError("You are not permitted to view this topic")


def ensure_can_moderate(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_moderate(user, topic):
        raise AuthorizationError("Only staff can change the status of a topic")


def ensure_can_move_posts(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_move_posts(user, topic):
        raise AuthorizationError("Only staff can move posts")


def ensure_can_invite_to(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_invite_to(user, topic):
        raise AuthorizationError("You are not permitted to invite users to this topic")


def ensure_can_create_post(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_create_post(user, topic):
        raise AuthorizationError("You are not permitted to reply to this topic")


def ensure_can_edit_post(user: Optional[User], post: Post) -> None:
    if not can_edit_post(user, post):
        raise AuthorizationError("You are not permitted to edit this post")


def can_edit_topic(user: Optional[User], topic: Optional[Topic]) -> bool:
    if user is None or not can_see(user, topic):
        return False
    if is_staff(user):
        return True
    return topic.user_id == user.id and not topic.archived


def ensure_can_edit_topic(user: Optional[User], topic: Optional[Topic]) -> None:
    if not can_edit_topic(user, topic):
        raise AuthorizationError("You are not permitted to edit this topic")
