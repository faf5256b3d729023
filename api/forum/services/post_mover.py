"""
Post mover - moves posts out of a topic into a new or an existing topic.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy import func

from forum.core.config import settings
from forum.core.exceptions import InvalidParameters, NotFoundError
from forum.models.models import Post, Topic, TopicLink, TopicUser, User
from forum.services import guardian, job_service, post_service, topic_service

logger = logging.getLogger(__name__)

MOVED_POSTS_MESSAGE = "{count} posts were split to a new topic: {topic_link}"
MOVED_POST_MESSAGE = "A post was split to a new topic: {topic_link}"


def move_posts(
    session: Session,
    topic: Topic,
    moved_by: User,
    post_ids: List[int],
    title: Optional[str] = None,
    destination_topic_id: Optional[int] = None,
) -> Topic:
    """
    Move posts from a topic to another topic.

    Posts go to the existing topic ``destination_topic_id`` when given,
    otherwise to a new topic called ``title`` in the same category. The first
    post of the topic is copied rather than moved so the original topic keeps
    its opening post.

    Args:
        session: Database session
        topic: Topic the posts are taken from
        moved_by: User moving the posts
        post_ids: IDs of the posts to move
        title: Title of the new topic
        destination_topic_id: ID of an existing topic to move the posts into

    Returns:
        The topic the posts were moved to

    Raises:
        InvalidParameters: If no posts are given, a post is not part of the
            topic, or no destination is given
        NotFoundError: If the destination topic does not exist
    """
    # Repeated ids count once, first occurrence wins
    post_ids = list(dict.fromkeys(int(post_id) for post_id in (post_ids or [])))
    if not post_ids:
        raise InvalidParameters("post_ids", "No posts were selected")

    posts = session.exec(
        select(Post).where(
            Post.id.in_(post_ids),  # type: ignore[attr-defined]
            Post.topic_id == topic.id,
            Post.deleted_at.is_(None),
        ).order_by(Post.created_at, Post.id)  # type: ignore[arg-type]
    ).all()
    if len(posts) != len(post_ids):
        raise InvalidParameters("post_ids", "Some of the posts do not belong to this topic")

    if destination_topic_id is not None:
        destination = session.get(Topic, destination_topic_id)
        if destination is None or destination.deleted_at is not None:
            raise NotFoundError(f"Topic with id {destination_topic_id} not found")
        if destination.id == topic.id:
            raise InvalidParameters("destination_topic_id", "Posts can't be moved to the same topic")
        guardian.ensure_can_see(moved_by, destination)
    elif title:
        destination = topic_service.create_topic(
            session, moved_by, title, category_id=topic.category_id, commit=False
        )
    else:
        raise InvalidParameters("destination_topic_id", "A title or a destination topic is required")

    first_post_number = _move_posts_to(session, topic, destination, posts)

    topic_link = f"[{destination.title}]({settings.base_url}{destination.relative_url})"
    template = MOVED_POSTS_MESSAGE if len(post_ids) > 1 else MOVED_POST_MESSAGE
    topic_service.add_moderator_post(
        session, topic, moved_by,
        template.format(count=len(post_ids), topic_link=topic_link),
        post_number=first_post_number,
        commit=False,
    )

    post_service.update_statistics(session, destination)
    post_service.update_statistics(session, topic)
    _update_last_read(session, topic)

    job_service.enqueue(session, "notify_moved_posts", post_ids=post_ids, moved_by_id=moved_by.id)

    session.commit()
    session.refresh(destination)
    logger.info(
        f"User {moved_by.id} moved {len(post_ids)} post(s) from topic {topic.id} to topic {destination.id}"
    )
    return destination


def _move_posts_to(session: Session, topic: Topic, destination: Topic, posts: List[Post]) -> Optional[int]:
    """
    Renumber the posts at the end of the destination topic.

    Returns:
        Post number the first moved post had in the original topic, None if
        only the first post was selected
    """
    next_number = post_service.max_post_number(session, destination) + 1
    first_post_number = None

    for post in posts:
        if post.post_number == 1:
            post_service.create_post(
                session, post.user, destination, post.raw,
                post_number=next_number, commit=False
            )
        else:
            if first_post_number is None:
                first_post_number = post.post_number
            post.topic_id = destination.id
            post.post_number = next_number
            post.sort_order = next_number
            session.add(post)
            for link in session.exec(select(TopicLink).where(TopicLink.post_id == post.id)).all():
                link.topic_id = destination.id
                session.add(link)
        next_number += 1

    session.flush()
    return first_post_number


def _update_last_read(session: Session, topic: Topic) -> None:
    """Pull readers of the original topic back to the posts that are left."""
    topic_users = session.exec(
        select(TopicUser).where(
            TopicUser.topic_id == topic.id,
            TopicUser.last_read_post_number.isnot(None),  # type: ignore[union-attr]
        )
    ).all()

    for topic_user in topic_users:
        last_remaining = session.exec(
            select(func.max(Post.post_number)).where(
                Post.topic_id == topic.id,
                Post.post_number <= topic_user.last_read_post_number,
                Post.deleted_at.is_(None),
            )
        ).one()
        topic_user.last_read_post_number = last_remaining
        if topic_user.seen_post_count is not None:
            topic_user.seen_post_count = min(topic_user.seen_post_count, topic.posts_count)
        session.add(topic_user)
