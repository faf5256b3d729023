"""
Model enums.
"""
from enum import Enum, IntEnum


class Archetype(str, Enum):
    """Kind of topic."""
    REGULAR = "regular"
    PRIVATE_MESSAGE = "private_message"


class PostType(IntEnum):
    """Post types."""
    REGULAR = 1
    MODERATOR_ACTION = 2


class PostActionType(IntEnum):
    """Actions a user can take on a post."""
    BOOKMARK = 1
    LIKE = 2


class TopicStatus(str, Enum):
    """Statuses a moderator can toggle on a topic."""
    VISIBLE = "visible"
    PINNED = "pinned"
    ARCHIVED = "archived"
    CLOSED = "closed"
    AUTOCLOSED = "autoclosed"


class UserActionType(IntEnum):
    """Entries of a user's activity stream."""
    LIKE = 1
    WAS_LIKED = 2
    BOOKMARK = 3
    NEW_TOPIC = 4
    REPLY = 5
    RESPONSE = 6
    STAR = 10
    EDIT = 11
    NEW_PRIVATE_MESSAGE = 12
    GOT_PRIVATE_MESSAGE = 13


class NotificationType(IntEnum):
    """Notification types."""
    MENTIONED = 1
    REPLIED = 2
    QUOTED = 3
    EDITED = 4
    LIKED = 5
    PRIVATE_MESSAGE = 6
    INVITED_TO_PRIVATE_MESSAGE = 7
    INVITEE_ACCEPTED = 8
    POSTED = 9
    MOVED_POST = 10


class JobStatus(str, Enum):
    """Lifecycle of a scheduled job."""
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"
