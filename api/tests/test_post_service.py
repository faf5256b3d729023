"""
Tests for the post service and post actions.
"""
from datetime import datetime, timedelta

import pytest
import time_machine
from sqlmodel import select

from forum.models.models import (
    Notification,
    NotificationType,
    Post,
    PostAction,
    TopicLink,
    UserAction,
    UserActionType,
)
from forum.services import post_action_service, post_service
from tests.factories import PostFactory, TopicFactory, UserFactory

T0 = datetime(2026, 3, 1, 12, 0)


class TestBumping:
    """Tests for bumping topics."""

    @pytest.fixture
    def topic(self, session):
        return TopicFactory(bumped_at=datetime.utcnow() - timedelta(days=365))

    def test_new_post_bumps_topic(self, session, topic) -> None:
        bumped_at = topic.bumped_at

        PostFactory(topic=topic, user=topic.user)
        session.refresh(topic)

        assert topic.bumped_at != bumped_at

    @pytest.fixture
    def posts(self, session, topic):
        with time_machine.travel(T0, tick=False):
            earlier_post = PostFactory(topic=topic, user=topic.user)
            last_post = PostFactory(topic=topic, user=topic.user)
        session.refresh(topic)
        return earlier_post, last_post

    def test_ninja_edit_does_not_bump(self, session, topic, posts) -> None:
        _, last_post = posts
        bumped_at = topic.bumped_at

        post_service.revise_post(
            session, last_post, last_post.user, "updated contents",
            revised_at=last_post.created_at + timedelta(seconds=10),
        )
        session.refresh(topic)

        assert topic.bumped_at == bumped_at
        assert last_post.version == 1

    def test_new_version_of_last_post_bumps(self, session, topic, posts, moderator) -> None:
        _, last_post = posts
        bumped_at = topic.bumped_at

        with time_machine.travel(T0 + timedelta(hours=1), tick=False):
            post_service.revise_post(session, last_post, moderator, "updated contents")
        session.refresh(topic)

        assert topic.bumped_at != bumped_at
        assert last_post.version == 2

    def test_new_version_of_earlier_post_does_not_bump(self, session, topic, posts, moderator) -> None:
        earlier_post, _ = posts
        bumped_at = topic.bumped_at

        with time_machine.travel(T0 + timedelta(hours=1), tick=False):
            post_service.revise_post(session, earlier_post, moderator, "updated contents")
        session.refresh(topic)

        assert topic.bumped_at == bumped_at
        assert earlier_post.version == 2


class TestRevisePost:
    """Tests for revise_post."""

    def test_unchanged_text(self, session) -> None:
        post = PostFactory()

        assert post_service.revise_post(session, post, post.user, post.raw) is False

    def test_author_edit_after_window_creates_version(self, session, forum_settings) -> None:
        post = PostFactory()

        post_service.revise_post(
            session, post, post.user, "much later",
            revised_at=post.created_at + timedelta(seconds=forum_settings.ninja_edit_window + 1),
        )

        assert post.version == 2

    def test_edit_by_other_user_is_logged(self, session, moderator) -> None:
        post = PostFactory()

        post_service.revise_post(session, post, moderator, "edited by a moderator")

        action = session.exec(
            select(UserAction).where(UserAction.action_type == UserActionType.EDIT)
        ).one()
        assert action.user_id == post.user_id
        assert action.acting_user_id == moderator.id

    def test_links_are_extracted_again(self, session) -> None:
        post = PostFactory(raw="first http://one.example.com")

        post_service.revise_post(session, post, post.user, "second http://two.example.com")

        links = session.exec(select(TopicLink).where(TopicLink.post_id == post.id)).all()
        assert [link.url for link in links] == ["http://two.example.com"]


class TestCreatePost:
    """Tests for create_post bookkeeping."""

    def test_numbers_posts(self, session) -> None:
        topic = TopicFactory()
        p1 = PostFactory(topic=topic, user=topic.user)
        p2 = PostFactory(topic=topic, user=topic.user)
        session.refresh(topic)

        assert (p1.post_number, p2.post_number) == (1, 2)
        assert (p1.sort_order, p2.sort_order) == (1, 2)
        assert topic.posts_count == 2
        assert topic.highest_post_number == 2

    def test_reply_is_logged(self, session) -> None:
        topic = TopicFactory()
        PostFactory(topic=topic, user=topic.user)
        reply = PostFactory(topic=topic)

        action = session.exec(
            select(UserAction).where(UserAction.action_type == UserActionType.REPLY)
        ).one()
        assert action.target_post_id == reply.id

    def test_internal_links(self, session, forum_settings) -> None:
        post = PostFactory(raw="see http://forum.test/t/other/1 and http://example.com")

        links = session.exec(select(TopicLink).where(TopicLink.post_id == post.id)).all()
        assert {link.url: link.internal for link in links} == {
            "http://forum.test/t/other/1": True,
            "http://example.com": False,
        }

    def test_featured_users(self, session) -> None:
        topic = TopicFactory()
        PostFactory(topic=topic, user=topic.user)
        first = UserFactory()
        second = UserFactory()
        last = UserFactory()
        PostFactory(topic=topic, user=first)
        PostFactory(topic=topic, user=second)
        PostFactory(topic=topic, user=last)
        session.refresh(topic)

        assert topic.last_post_user_id == last.id
        assert topic.featured_user_ids == [second.id, first.id]


class TestDestroyPost:
    """Tests for destroy_post."""

    def test_updates_statistics(self, session) -> None:
        topic = TopicFactory()
        PostFactory(topic=topic, user=topic.user)
        reply = PostFactory(topic=topic)

        post_service.destroy_post(session, reply)
        session.refresh(topic)

        assert topic.posts_count == 1
        assert topic.highest_post_number == 2
        assert topic.last_post_user_id == topic.user_id
        assert topic.featured_user_ids == []

    def test_destroying_first_post_destroys_topic(self, session) -> None:
        post = PostFactory()

        post_service.destroy_post(session, post)

        assert post.topic.deleted_at is not None


class TestPostActions:
    """Tests for likes."""

    @pytest.fixture
    def post(self, session):
        return PostFactory()

    def test_like(self, session, post, user) -> None:
        post_action_service.act(session, user, post)
        session.refresh(post)

        assert post.like_count == 1
        assert post.topic.like_count == 1
        notification = session.exec(select(Notification)).one()
        assert notification.notification_type == NotificationType.LIKED
        assert notification.user_id == post.user_id
        types = {a.action_type for a in session.exec(select(UserAction)).all()}
        assert {UserActionType.LIKE, UserActionType.WAS_LIKED} <= types

    def test_like_twice_counts_once(self, session, post, user) -> None:
        post_action_service.act(session, user, post)
        post_action_service.act(session, user, post)
        session.refresh(post)

        assert post.like_count == 1
        assert len(session.exec(select(PostAction)).all()) == 1

    def test_unlike(self, session, post, user) -> None:
        post_action_service.act(session, user, post)

        assert post_action_service.remove_act(session, user, post) is True
        session.refresh(post)

        assert post.like_count == 0
        assert post.topic.like_count == 0
        assert session.exec(
            select(UserAction).where(UserAction.action_type == UserActionType.LIKE)
        ).all() == []

    def test_unlike_without_like(self, session, post, user) -> None:
        assert post_action_service.remove_act(session, user, post) is False

    def test_deleted_posts_do_not_count(self, session, post, user) -> None:
        reply = PostFactory(topic=post.topic, user=user)
        post_action_service.act(session, post.user, reply)

        post_service.destroy_post(session, reply)
        topic = post.topic
        session.refresh(topic)

        assert topic.like_count == 0
        assert session.get(Post, reply.id).deleted_at is not None
