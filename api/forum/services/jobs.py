"""
Background job handlers.

Each handler receives the worker's session and the job's arguments.
"""
import logging
from typing import List

from sqlmodel import Session, select

from forum.models.models import EmailLog, Invite, NotificationType, Post, Topic, User
from forum.services import guardian, notification_service, topic_service
from forum.services.job_service import job

logger = logging.getLogger(__name__)


@job("close_topic")
def close_topic(session: Session, topic_id: int, user_id: int) -> None:
    """Close a topic whose auto-close time has come."""
    topic = session.get(Topic, topic_id)
    if topic is None or topic.deleted_at is not None or topic.closed or topic.auto_close_at is None:
        logger.info(f"Skipping auto-close of topic {topic_id}: nothing to close")
        return

    closer = session.get(User, user_id)
    if not guardian.can_moderate(closer, topic):
        logger.warning(f"Skipping auto-close of topic {topic_id}: user {user_id} can't close it")
        return

    topic_service.update_status(session, topic, "autoclosed", True, closer)


@job("notify_moved_posts")
def notify_moved_posts(session: Session, post_ids: List[int], moved_by_id: int) -> None:
    """Tell the authors of moved posts where their posts went."""
    moved_by = session.get(User, moved_by_id)
    posts = session.exec(
        select(Post).where(Post.id.in_(post_ids)).order_by(Post.post_number)  # type: ignore[attr-defined]
    ).all()

    notified = set()
    for post in posts:
        if post.user_id == moved_by_id or post.user_id in notified:
            continue
        notified.add(post.user_id)
        notification_service.notify(
            session, post.user_id, NotificationType.MOVED_POST,
            topic=post.topic, post_number=post.post_number, acting_user=moved_by
        )
    session.commit()
    logger.info(f"Notified {len(notified)} user(s) about moved posts")


@job("user_email")
def user_email(session: Session, type: str, user_id: int, post_id: int = None) -> None:
    """Hand a notification email for a user to the mailer."""
    user = session.get(User, user_id)
    if user is None:
        logger.warning(f"Skipping {type} email: user {user_id} not found")
        return

    if type == "private_message":
        if not user.email_private_messages:
            logger.info(f"Skipping private message email: user {user_id} opted out")
            return
        post = session.get(Post, post_id) if post_id is not None else None
        if post is None or post.deleted_at is not None:
            logger.info(f"Skipping private message email: post {post_id} is gone")
            return
    else:
        raise ValueError(f"Unknown email type: {type}")

    session.add(EmailLog(email_type=type, to_address=user.email, user_id=user.id, post_id=post_id))
    session.commit()


@job("invite_email")
def invite_email(session: Session, invite_id: int) -> None:
    """Hand an invitation email to the mailer."""
    invite = session.get(Invite, invite_id)
    if invite is None or invite.redeemed_at is not None:
        logger.info(f"Skipping invite email: invite {invite_id} is gone or redeemed")
        return

    session.add(EmailLog(email_type="invite", to_address=invite.email, invite_id=invite.id))
    session.commit()
