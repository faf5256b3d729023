"""
Tests for moving posts between topics.
"""
from unittest.mock import Mock

import pytest
from sqlmodel import select

from forum.core.exceptions import AuthorizationError, InvalidParameters, NotFoundError
from forum.models.models import Post, PostType, ScheduledJob, Topic
from forum.services import post_action_service, post_mover, topic_service, topic_user_service
from tests.factories import PostFactory, TopicFactory, UserFactory


@pytest.fixture
def another_user(session):
    return UserFactory()


@pytest.fixture
def topic(session, user, category):
    return TopicFactory(user=user, category=category)


@pytest.fixture
def posts(session, topic, user, another_user):
    p1 = PostFactory(topic=topic, user=user)
    p2 = PostFactory(topic=topic, user=another_user)
    p3 = PostFactory(topic=topic, user=another_user)
    p4 = PostFactory(topic=topic, user=user)
    return p1, p2, p3, p4


def _topic_posts(session, topic):
    return session.exec(
        select(Post).where(Post.topic_id == topic.id, Post.deleted_at.is_(None)).order_by(Post.post_number)
    ).all()


class TestMovePostsErrors:
    """Tests for invalid moves."""

    def test_post_from_another_topic(self, session, topic, posts, moderator) -> None:
        other = PostFactory()

        with pytest.raises(InvalidParameters):
            post_mover.move_posts(session, topic, moderator, [posts[1].id, other.id], title="new testing topic name")

    def test_no_posts_creates_no_topic(self, session, topic, posts, moderator) -> None:
        count = len(session.exec(select(Topic)).all())

        with pytest.raises(InvalidParameters):
            post_mover.move_posts(session, topic, moderator, [], title="new testing topic name")

        assert len(session.exec(select(Topic)).all()) == count

    def test_no_destination(self, session, topic, posts, moderator) -> None:
        with pytest.raises(InvalidParameters):
            post_mover.move_posts(session, topic, moderator, [posts[1].id])

    def test_missing_destination_topic(self, session, topic, posts, moderator) -> None:
        with pytest.raises(NotFoundError):
            post_mover.move_posts(session, topic, moderator, [posts[1].id], destination_topic_id=99999)

    def test_same_destination_topic(self, session, topic, posts, moderator) -> None:
        with pytest.raises(InvalidParameters):
            post_mover.move_posts(session, topic, moderator, [posts[1].id], destination_topic_id=topic.id)

    def test_destination_the_mover_cannot_see(self, session, topic, posts, moderator, another_user) -> None:
        secret = TopicFactory(
            user=another_user, title="private conversation",
            archetype="private_message", target_users=[UserFactory()],
        )

        with pytest.raises(AuthorizationError):
            post_mover.move_posts(session, topic, moderator, [posts[1].id], destination_topic_id=secret.id)


class TestMoveToNewTopic:
    """Tests for moving posts to a new topic."""

    @pytest.fixture
    def moved(self, session, topic, posts, moderator, user):
        _, p2, _, _ = posts
        post_action_service.act(session, user, p2)
        new_topic = post_mover.move_posts(
            session, topic, moderator, [posts[1].id, posts[3].id], title="new testing topic name"
        )
        session.refresh(topic)
        return new_topic

    def test_new_topic(self, session, topic, posts, moved, moderator, user, another_user, category) -> None:
        _, p2, _, p4 = posts

        assert moved.title == "new testing topic name"
        assert moved.user_id == moderator.id
        assert moved.category_id == category.id
        assert moved.posts_count == 2
        assert moved.highest_post_number == 2
        assert moved.like_count == 1
        assert moved.last_post_user_id == user.id
        assert moved.featured_user1_id == another_user.id
        assert [post.id for post in _topic_posts(session, moved)] == [p2.id, p4.id]
        assert [post.post_number for post in _topic_posts(session, moved)] == [1, 2]

    def test_original_topic(self, session, topic, posts, moved) -> None:
        p1, _, p3, _ = posts
        remaining = _topic_posts(session, topic)

        assert [post.post_number for post in remaining] == [1, 2, 3]
        assert remaining[0].id == p1.id
        assert remaining[1].post_type == PostType.MODERATOR_ACTION.value
        assert "2 posts were split to a new topic" in remaining[1].raw
        assert moved.relative_url in remaining[1].raw
        assert remaining[2].id == p3.id
        assert topic.posts_count == 3
        assert topic.highest_post_number == 3
        assert topic.like_count == 0

    def test_last_read_is_pulled_back(self, session, topic, posts, moved, user) -> None:
        _, _, p3, _ = posts

        topic_user = topic_user_service.get(session, user, topic.id)
        assert topic_user.last_read_post_number == p3.post_number
        assert topic_user.seen_post_count == 3

    def test_notify_job_is_enqueued(self, session, posts, moved, moderator) -> None:
        scheduled = session.exec(
            select(ScheduledJob).where(ScheduledJob.job_name == "notify_moved_posts")
        ).one()

        assert scheduled.args == {"post_ids": [posts[1].id, posts[3].id], "moved_by_id": moderator.id}


class TestModeratorPost:
    """Tests for the moderator post left behind."""

    def test_takes_number_of_first_moved_post(self, session, topic, posts, moderator, monkeypatch) -> None:
        add_moderator_post = Mock(wraps=topic_service.add_moderator_post)
        monkeypatch.setattr(topic_service, "add_moderator_post", add_moderator_post)

        post_mover.move_posts(session, topic, moderator, [posts[1].id], title="new testing topic name")

        add_moderator_post.assert_called_once()
        assert add_moderator_post.call_args.kwargs["post_number"] == 2
        assert add_moderator_post.call_args.args[3].startswith("A post was split to a new topic")

    def test_repeated_ids_count_once(self, session, topic, posts, moderator) -> None:
        _, p2, _, _ = posts

        new_topic = post_mover.move_posts(session, topic, moderator, [p2.id, p2.id], title="new testing topic name")

        moderator_post = _topic_posts(session, topic)[1]
        assert moderator_post.post_type == PostType.MODERATOR_ACTION.value
        assert moderator_post.raw.startswith("A post was split to a new topic")
        assert new_topic.posts_count == 1
        scheduled = session.exec(
            select(ScheduledJob).where(ScheduledJob.job_name == "notify_moved_posts")
        ).one()
        assert scheduled.args["post_ids"] == [p2.id]


class TestMoveToExistingTopic:
    """Tests for moving posts into an existing topic."""

    def test_posts_are_appended(self, session, topic, posts, moderator, another_user) -> None:
        _, p2, _, p4 = posts
        destination = TopicFactory(user=another_user)
        p5 = PostFactory(topic=destination, user=another_user)

        moved = post_mover.move_posts(session, topic, moderator, [p2.id, p4.id], destination_topic_id=destination.id)

        assert moved.id == destination.id
        assert [post.id for post in _topic_posts(session, destination)] == [p5.id, p2.id, p4.id]
        assert [post.post_number for post in _topic_posts(session, destination)] == [1, 2, 3]
        assert destination.posts_count == 3
        assert destination.highest_post_number == 3


class TestMoveFirstPost:
    """Tests for moving the opening post."""

    def test_first_post_is_copied(self, session, topic, posts, moderator) -> None:
        p1, _, _, _ = posts

        moved = post_mover.move_posts(session, topic, moderator, [p1.id], title="new testing topic name")
        session.refresh(topic)

        copies = _topic_posts(session, moved)
        assert len(copies) == 1
        assert copies[0].id != p1.id
        assert copies[0].raw == p1.raw
        assert copies[0].user_id == p1.user_id

        remaining = _topic_posts(session, topic)
        assert remaining[0].id == p1.id
        assert remaining[-1].post_type == PostType.MODERATOR_ACTION.value
        assert remaining[-1].post_number == 5
