"""
Models module - re-exports all models.

Keeps imports like:
    from forum.models.models import Topic

working from endpoints, services and migrations.
"""
from forum.models.enums import (
    Archetype,
    PostType,
    PostActionType,
    TopicStatus,
    UserActionType,
    NotificationType,
    JobStatus,
)
from forum.models.user import User
from forum.models.category import Category
from forum.models.topic_allowed_user import TopicAllowedUser
from forum.models.invite import Invite, TopicInvite
from forum.models.topic import Topic
from forum.models.post import Post
from forum.models.post_action import PostAction
from forum.models.topic_user import TopicUser
from forum.models.topic_link import TopicLink
from forum.models.topic_revision import TopicRevision
from forum.models.notification import Notification
from forum.models.user_action import UserAction
from forum.models.scheduled_job import ScheduledJob, EmailLog, RateLimitEvent

__all__ = [
    'Archetype',
    'PostType',
    'PostActionType',
    'TopicStatus',
    'UserActionType',
    'NotificationType',
    'JobStatus',
    'User',
    'Category',
    'TopicAllowedUser',
    'Invite',
    'TopicInvite',
    'Topic',
    'Post',
    'PostAction',
    'TopicUser',
    'TopicLink',
    'TopicRevision',
    'Notification',
    'UserAction',
    'ScheduledJob',
    'EmailLog',
    'RateLimitEvent',
]
