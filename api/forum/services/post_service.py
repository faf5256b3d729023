"""
Post service for creating, revising and deleting posts.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy import func

from forum.core.config import settings
from forum.models.models import (
    Post,
    PostType,
    Topic,
    TopicAllowedUser,
    TopicLink,
    User,
    UserActionType,
    NotificationType,
)
from forum.services import job_service, notification_service, topic_user_service, user_action_service
from forum.utils.text_utils import extract_links, link_domain

logger = logging.getLogger(__name__)

FEATURED_USER_SLOTS = 4


def create_post(
    session: Session,
    user: User,
    topic: Topic,
    raw: str,
    post_type: int = PostType.REGULAR,
    post_number: Optional[int] = None,
    bump: Optional[bool] = None,
    created_at: Optional[datetime] = None,
    commit: bool = True,
) -> Post:
    """
    Add a post to a topic and update the topic's summary.

    Args:
        session: Database session
        user: Author of the post
        topic: Topic the post belongs to
        raw: Post text
        post_type: PostType.REGULAR or PostType.MODERATOR_ACTION
        post_number: Explicit number (and sort order); next number when omitted
        bump: Whether to bump the topic; defaults to True for regular posts only
        created_at: Creation time, now when omitted
        commit: Commit the session when done

    Returns:
        The created post
    """
    now = created_at or datetime.utcnow()
    regular = int(post_type) == PostType.REGULAR

    if post_number is None:
        post_number = (topic.highest_post_number or 0) + 1

    post = Post(
        topic_id=topic.id,
        user_id=user.id,
        post_number=post_number,
        sort_order=post_number,
        raw=raw,
        post_type=int(post_type),
        created_at=now,
        updated_at=now,
        last_version_at=now,
    )
    session.add(post)

    topic.posts_count = (topic.posts_count or 0) + 1
    topic.highest_post_number = max(topic.highest_post_number or 0, post_number)
    if regular:
        topic.last_posted_at = now
        topic.last_post_user_id = user.id
    else:
        topic.moderator_posts_count = (topic.moderator_posts_count or 0) + 1

    should_bump = regular if bump is None else bump
    if should_bump:
        topic.bumped_at = now
    session.add(topic)
    session.flush()

    if regular:
        topic_user = topic_user_service.get(session, user, topic.id)
        last_read = max(topic_user.last_read_post_number or 0, post_number) if topic_user else post_number
        topic_user_service.change(
            session, user, topic.id,
            posted=True,
            last_read_post_number=last_read,
            seen_post_count=last_read,
        )
        if post_number > 1 and not topic.private_message:
            user_action_service.log_action(
                session, UserActionType.REPLY, user.id, topic_id=topic.id, post_id=post.id
            )

    extract_topic_links(session, post)
    feature_topic_users(session, topic)

    if regular and topic.private_message:
        _notify_private_message_users(session, topic, post, user)

    if commit:
        session.commit()
        session.refresh(post)

    return post


def revise_post(
    session: Session,
    post: Post,
    editor: User,
    raw: str,
    revised_at: Optional[datetime] = None,
) -> bool:
    """
    Change the text of a post.

    An edit by the author within the ninja edit window of the last version
    keeps the version. Any other edit creates a new version and bumps the
    topic when the post is the topic's last post.

    Returns:
        False when the text did not change
    """
    if raw == post.raw:
        return False

    revised_at = revised_at or datetime.utcnow()
    since_last_version = (revised_at - post.last_version_at).total_seconds()
    ninja_edit = editor.id == post.user_id and since_last_version < settings.ninja_edit_window

    post.raw = raw
    post.updated_at = revised_at
    if not ninja_edit:
        post.version += 1
        post.last_version_at = revised_at
        if is_last_post(session, post):
            topic = post.topic
            topic.bumped_at = revised_at
            session.add(topic)
        if editor.id != post.user_id:
            user_action_service.log_action(
                session, UserActionType.EDIT, post.user_id,
                acting_user_id=editor.id, topic_id=post.topic_id, post_id=post.id
            )
    session.add(post)

    for link in session.exec(select(TopicLink).where(TopicLink.post_id == post.id)).all():
        session.delete(link)
    session.flush()
    extract_topic_links(session, post)

    session.commit()
    session.refresh(post)
    logger.info(f"Revised post {post.id} (version {post.version}, ninja edit: {ninja_edit})")
    return True


def destroy_post(session: Session, post: Post, user: Optional[User] = None) -> None:
    """Soft delete a post. Deleting the first post deletes the whole topic."""
    topic = post.topic
    now = datetime.utcnow()

    post.deleted_at = now
    session.add(post)
    session.flush()

    if post.post_number == 1:
        from forum.services import topic_service
        topic_service.destroy_topic(session, topic, commit=False)

    update_statistics(session, topic)
    session.commit()
    logger.info(f"Deleted post {post.id} from topic {topic.id}")


def is_last_post(session: Session, post: Post) -> bool:
    """Whether the post is the topic's most recent regular post."""
    last_number = session.exec(
        select(func.max(Post.post_number)).where(
            Post.topic_id == post.topic_id,
            Post.post_type == PostType.REGULAR.value,
            Post.deleted_at.is_(None),
        )
    ).one()
    return last_number == post.post_number


def post_numbers(session: Session, topic: Topic) -> List[int]:
    """Ordered post numbers of the topic's non-deleted posts."""
    return list(session.exec(
        select(Post.post_number).where(
            Post.topic_id == topic.id,
            Post.deleted_at.is_(None),
        ).order_by(Post.post_number)
    ).all())


def max_post_number(session: Session, topic: Topic) -> int:
    """Highest post number ever used in the topic, deleted posts included."""
    return session.exec(
        select(func.max(Post.post_number)).where(Post.topic_id == topic.id)
    ).one() or 0


def feature_topic_users(session: Session, topic: Topic) -> None:
    """
    Feature the most recent distinct posters of a topic.

    The topic creator and the last poster are shown separately, so they are
    never featured.
    """
    excluded = [user_id for user_id in (topic.user_id, topic.last_post_user_id) if user_id is not None]
    last_post_id = func.max(Post.id)
    query = (
        select(Post.user_id, last_post_id)
        .where(
            Post.topic_id == topic.id,
            Post.post_type == PostType.REGULAR.value,
            Post.deleted_at.is_(None),
        )
        .group_by(Post.user_id)
        .order_by(last_post_id.desc())
        .limit(FEATURED_USER_SLOTS)
    )
    if excluded:
        query = query.where(Post.user_id.notin_(excluded))  # type: ignore[attr-defined]

    user_ids = [row[0] for row in session.exec(query).all()]
    user_ids += [None] * (FEATURED_USER_SLOTS - len(user_ids))
    topic.featured_user1_id, topic.featured_user2_id, topic.featured_user3_id, topic.featured_user4_id = user_ids
    session.add(topic)


def update_statistics(session: Session, topic: Topic) -> None:
    """Recompute a topic's denormalized counters from its posts."""
    session.flush()
    posts = session.exec(
        select(Post).where(
            Post.topic_id == topic.id,
            Post.deleted_at.is_(None),
        ).order_by(Post.post_number)
    ).all()

    topic.posts_count = len(posts)
    topic.highest_post_number = max_post_number(session, topic)
    topic.like_count = sum(post.like_count for post in posts)
    topic.moderator_posts_count = sum(1 for post in posts if not post.regular)

    regular_posts = [post for post in posts if post.regular]
    if regular_posts:
        last_post = regular_posts[-1]
        topic.last_post_user_id = last_post.user_id
        topic.last_posted_at = last_post.created_at
    session.add(topic)
    session.flush()

    feature_topic_users(session, topic)


def extract_topic_links(session: Session, post: Post) -> List[TopicLink]:
    """Record the links mentioned in a post."""
    base_domain = link_domain(settings.base_url)
    links = []
    for url in extract_links(post.raw):
        domain = link_domain(url)
        link = TopicLink(
            topic_id=post.topic_id,
            post_id=post.id,
            user_id=post.user_id,
            url=url,
            domain=domain,
            internal=domain == base_domain,
        )
        session.add(link)
        links.append(link)
    return links


def _notify_private_message_users(session: Session, topic: Topic, post: Post, poster: User) -> None:
    """Alert the other participants of a private message, by email when they accept it."""
    recipients = session.exec(
        select(User)
        .join(TopicAllowedUser, TopicAllowedUser.user_id == User.id)
        .where(TopicAllowedUser.topic_id == topic.id, User.id != poster.id)
    ).all()

    for recipient in recipients:
        notification_service.notify(
            session, recipient.id, NotificationType.PRIVATE_MESSAGE,
            topic=topic, post_number=post.post_number, acting_user=poster
        )
        if recipient.email_private_messages:
            job_service.enqueue(
                session, "user_email",
                type="private_message", user_id=recipient.id, post_id=post.id
            )
