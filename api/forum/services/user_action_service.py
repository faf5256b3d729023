"""
User action service - records entries of users' activity streams.
"""
from typing import Optional

from sqlmodel import Session, select

from forum.models.models import UserAction


def log_action(
    session: Session,
    action_type: int,
    user_id: int,
    acting_user_id: Optional[int] = None,
    topic_id: Optional[int] = None,
    post_id: Optional[int] = None,
) -> UserAction:
    action = UserAction(
        action_type=int(action_type),
        user_id=user_id,
        acting_user_id=acting_user_id if acting_user_id is not None else user_id,
        target_topic_id=topic_id,
        target_post_id=post_id,
    )
    session.add(action)
    return action


def remove_action(
    session: Session,
    action_type: int,
    user_id: int,
    topic_id: Optional[int] = None,
    post_id: Optional[int] = None,
) -> int:
    query = select(UserAction).where(
        UserAction.action_type == int(action_type),
        UserAction.user_id == user_id,
    )
    if topic_id is not None:
        query = query.where(UserAction.target_topic_id == topic_id)
    if post_id is not None:
        query = query.where(UserAction.target_post_id == post_id)

    actions = session.exec(query).all()
    for action in actions:
        session.delete(action)
    return len(actions)
