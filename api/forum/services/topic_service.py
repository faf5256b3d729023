"""
Topic service for business logic related to topics.

Topics are saved through ``save_topic`` so that titles are sanitized and
validated, versions are tracked and auto-close jobs follow the topic's
schedule.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple, Union

from sqlmodel import Session, select
from sqlalchemy import func, inspect, or_

from forum.core.config import settings
from forum.core.exceptions import InvalidParameters, ValidationError
from forum.models.models import (
    Archetype,
    Category,
    Invite,
    NotificationType,
    PostType,
    Post,
    Topic,
    TopicAllowedUser,
    TopicInvite,
    TopicRevision,
    TopicStatus,
    User,
    UserActionType,
)
from forum.services import (
    job_service,
    notification_service,
    post_service,
    topic_user_service,
    user_action_service,
)
from forum.services.rate_limiter import favorite_limiter, topic_limiter
from forum.utils.text_utils import sanitize_title

logger = logging.getLogger(__name__)

CLOSE_TOPIC_JOB = "close_topic"
EMAIL_PATTERN = re.compile(r"^.+@.+$")

# Changes that produce a new version of the topic
VERSIONED_FIELDS = ("title", "category_id")

# Scalar column -> relationship holding the same foreign key
TRACKED_FIELDS = {
    "title": None,
    "category_id": "category",
    "auto_close_at": None,
    "auto_close_user_id": "auto_close_user",
}

STOP_WORDS = {
    "a", "about", "after", "all", "also", "am", "an", "and", "any", "are", "as", "at",
    "be", "been", "but", "by", "can", "could", "did", "do", "does", "for", "from",
    "had", "has", "have", "how", "i", "if", "in", "into", "is", "it", "its", "just",
    "me", "my", "no", "not", "of", "on", "or", "our", "so", "some", "than", "that",
    "the", "their", "them", "then", "there", "these", "they", "this", "to", "was",
    "we", "were", "what", "when", "where", "which", "who", "why", "will", "with",
    "would", "you", "your",
}

STATUS_MESSAGES = {
    (TopicStatus.VISIBLE, True): "This topic is now visible. It will be displayed in topic lists.",
    (TopicStatus.VISIBLE, False): (
        "This topic is now invisible. It will no longer be displayed in any topic lists. "
        "The only way to access this topic is via direct link."
    ),
    (TopicStatus.PINNED, True): (
        "This topic is now pinned. It will appear at the top of its category until it is unpinned."
    ),
    (TopicStatus.PINNED, False): "This topic is now unpinned. It will no longer appear at the top of its category.",
    (TopicStatus.ARCHIVED, True): "This topic is now archived. It is frozen and cannot be changed in any way.",
    (TopicStatus.ARCHIVED, False): "This topic is now unarchived. It is no longer frozen, and can be changed.",
    (TopicStatus.CLOSED, True): "This topic is now closed. New replies are no longer allowed.",
    (TopicStatus.CLOSED, False): "This topic is now opened. New replies are allowed.",
    (TopicStatus.AUTOCLOSED, True): (
        "This topic was automatically closed after {days} days. New replies are no longer allowed."
    ),
    (TopicStatus.AUTOCLOSED, False): "This topic is now opened. New replies are allowed.",
}


# ---------------------------------------------------------------------------
# Validation and saving
# ---------------------------------------------------------------------------

def validate_topic(session: Session, topic: Topic) -> List[str]:
    """
    Sanitize the title and check the topic's validity.

    Returns:
        List of error messages, empty when the topic is valid
    """
    if topic.title:
        topic.title = sanitize_title(topic.title)

    errors = []
    title = (topic.title or "").strip()
    if not title:
        errors.append("Title can't be blank")
        return errors

    private_message = topic.archetype == Archetype.PRIVATE_MESSAGE.value
    min_length = (
        settings.min_private_message_title_length if private_message
        else settings.min_topic_title_length
    )
    if len(title) < min_length:
        errors.append(f"Title is too short (minimum is {min_length} characters)")
    if len(title) > settings.max_topic_title_length:
        errors.append(f"Title is too long (maximum is {settings.max_topic_title_length} characters)")

    if not private_message and not settings.allow_duplicate_topic_titles:
        with session.no_autoflush:
            query = select(Topic.id).where(
                func.lower(Topic.title) == title.lower(),
                Topic.archetype == Archetype.REGULAR.value,
                Topic.deleted_at.is_(None),
            )
            if topic.id is not None:
                query = query.where(Topic.id != topic.id)
            if session.exec(query).first() is not None:
                errors.append("Title has already been used")

    return errors


def is_valid(session: Session, topic: Topic) -> bool:
    return not validate_topic(session, topic)


def _current_value(topic: Topic, field: str, relationship: Optional[str]):
    # The foreign key only follows an assigned relationship at flush time
    if relationship is not None:
        related = inspect(topic).attrs[relationship].history
        if related.added:
            obj = related.added[0]
            return obj.id if obj is not None else None
    return getattr(topic, field)


def _pending_changes(session: Session, topic: Topic) -> Dict[str, list]:
    """Tracked fields that differ from the stored row, as field -> [old, new]."""
    columns = [getattr(Topic, field) for field in TRACKED_FIELDS]
    with session.no_autoflush:
        stored = session.exec(select(*columns).where(Topic.id == topic.id)).first()
        if stored is None:
            return {}

        changes = {}
        for (field, relationship), old in zip(TRACKED_FIELDS.items(), stored):
            new = _current_value(topic, field, relationship)
            if old != new:
                changes[field] = [old, new]
    return changes


def _prepare(session: Session, topic: Topic) -> Tuple[bool, Dict[str, list]]:
    state = inspect(topic)
    is_new = state.transient or state.pending
    if topic.title:
        topic.title = sanitize_title(topic.title)
    changes = {} if is_new else _pending_changes(session, topic)

    errors = validate_topic(session, topic)
    if errors:
        raise ValidationError(errors)
    return is_new, changes


def _persist(session: Session, topic: Topic, is_new: bool, changes: Dict[str, list], commit: bool) -> Topic:
    if any(field in changes for field in VERSIONED_FIELDS):
        topic.version = (topic.version or 1) + 1
        session.add(TopicRevision(
            topic_id=topic.id,
            number=topic.version,
            modifications={field: changes[field] for field in VERSIONED_FIELDS if field in changes},
        ))

    if "auto_close_at" in changes and topic.auto_close_at is None:
        topic.auto_close_user = None
        topic.auto_close_user_id = None

    topic.updated_at = datetime.utcnow()
    session.add(topic)
    session.flush()

    _schedule_auto_close(session, topic, is_new, changes)

    if commit:
        session.commit()
        session.refresh(topic)
    return topic


def save_topic(session: Session, topic: Topic, commit: bool = True) -> Topic:
    """
    Validate and save a topic.

    Raises:
        ValidationError: If the topic is invalid
    """
    is_new, changes = _prepare(session, topic)
    return _persist(session, topic, is_new, changes, commit)


def _schedule_auto_close(session: Session, topic: Topic, is_new: bool, changes: Dict[str, list]) -> None:
    if is_new:
        if topic.auto_close_at is not None:
            _enqueue_close(session, topic)
        return

    if "auto_close_at" not in changes and "auto_close_user_id" not in changes:
        return

    job_service.cancel_scheduled_job(session, CLOSE_TOPIC_JOB, topic_id=topic.id)
    if topic.auto_close_at is not None:
        _enqueue_close(session, topic)


def _enqueue_close(session: Session, topic: Topic) -> None:
    closer_id = topic.auto_close_user_id or topic.user_id
    job_service.enqueue_at(
        session, topic.auto_close_at, CLOSE_TOPIC_JOB,
        topic_id=topic.id, user_id=closer_id
    )


# ---------------------------------------------------------------------------
# Creating and deleting
# ---------------------------------------------------------------------------

def create_topic(
    session: Session,
    user: User,
    title: str,
    category: Optional[Category] = None,
    category_id: Optional[int] = None,
    archetype: str = Archetype.REGULAR.value,
    target_users: Optional[List[User]] = None,
    auto_close_at: Optional[datetime] = None,
    auto_close_user: Optional[User] = None,
    meta_data: Optional[dict] = None,
    bumped_at: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
    visible: bool = True,
    commit: bool = True,
) -> Topic:
    """
    Create a topic.

    Args:
        session: Database session
        user: Creator of the topic
        title: Topic title (HTML is stripped)
        category: Category the topic is posted in
        category_id: Alternative to category
        archetype: Archetype.REGULAR or Archetype.PRIVATE_MESSAGE
        target_users: Other participants of a private message
        auto_close_at: When to close the topic automatically
        auto_close_user: User the topic is closed by, the creator when omitted
        meta_data: Free-form key/value data
        bumped_at: Initial bump time, creation time when omitted
        created_at: Creation time, now when omitted
        visible: Whether the topic is listed
        commit: Commit the session when done

    Returns:
        The created topic

    Raises:
        ValidationError: If the topic is invalid
        RateLimitExceeded: If the user created too many topics today
    """
    if category is None and category_id is not None:
        category = session.get(Category, category_id)

    now = created_at or datetime.utcnow()
    topic = Topic(
        title=title,
        archetype=Archetype(archetype).value,
        user_id=user.id,
        category_id=category.id if category is not None else None,
        last_post_user_id=user.id,
        meta_data=dict(meta_data) if meta_data else None,
        auto_close_at=auto_close_at,
        auto_close_user_id=auto_close_user.id if auto_close_user is not None else None,
        visible=visible,
        created_at=now,
        updated_at=now,
        bumped_at=bumped_at or now,
    )

    # An explicit auto-close time wins over the category default
    if topic.auto_close_at is None and category is not None and category.auto_close_days:
        topic.auto_close_at = now + timedelta(days=category.auto_close_days)

    is_new, changes = _prepare(session, topic)
    topic_limiter(session, user).performed()
    _persist(session, topic, is_new, changes, commit=False)

    if category is not None:
        category.topic_count = (category.topic_count or 0) + 1
        session.add(category)

    if topic.private_message:
        participants = [user] + [target for target in (target_users or []) if target.id != user.id]
        seen = set()
        for participant in participants:
            if participant.id in seen:
                continue
            seen.add(participant.id)
            session.add(TopicAllowedUser(topic_id=topic.id, user_id=participant.id))
            action_type = (
                UserActionType.NEW_PRIVATE_MESSAGE if participant.id == user.id
                else UserActionType.GOT_PRIVATE_MESSAGE
            )
            user_action_service.log_action(
                session, action_type, participant.id, acting_user_id=user.id, topic_id=topic.id
            )
    else:
        user_action_service.log_action(session, UserActionType.NEW_TOPIC, user.id, topic_id=topic.id)

    if commit:
        session.commit()
        session.refresh(topic)

    logger.info(f"User {user.id} created topic {topic.id} ({topic.archetype})")
    return topic


def destroy_topic(session: Session, topic: Topic, commit: bool = True) -> None:
    """Soft delete a topic, releasing its title and its category slot."""
    if topic.deleted_at is not None:
        return

    topic.deleted_at = datetime.utcnow()
    if topic.category_id is not None:
        category = session.get(Category, topic.category_id)
        if category is not None:
            category.topic_count = max((category.topic_count or 0) - 1, 0)
            session.add(category)
    job_service.cancel_scheduled_job(session, CLOSE_TOPIC_JOB, topic_id=topic.id)
    session.add(topic)

    if commit:
        session.commit()
    logger.info(f"Deleted topic {topic.id}")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _significant_terms(text: str) -> set:
    terms = set()
    for word in re.findall(r"[a-z0-9]+", (text or "").lower()):
        if len(word) < 3 or word in STOP_WORDS:
            continue
        if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
            word = word[:-1]
        terms.add(word)
    return terms


def similar_to(session: Session, title: Optional[str], raw: Optional[str]) -> List[Topic]:
    """
    Find existing topics that look like a topic being written.

    Topics are ranked by the number of significant words their titles share
    with the new title and body. Only the most recently bumped matches are
    scored.
    """
    if not title and not raw:
        return []

    terms = _significant_terms(f"{title or ''} {raw or ''}")
    if not terms:
        return []

    candidates = session.exec(
        select(Topic).where(
            Topic.archetype == Archetype.REGULAR.value,
            Topic.visible == True,  # noqa: E712
            Topic.deleted_at.is_(None),
            or_(*[Topic.title.ilike(f"%{term}%") for term in terms]),  # type: ignore[attr-defined]
        ).order_by(Topic.bumped_at.desc(), Topic.id.desc())  # type: ignore[attr-defined]
        .limit(settings.similar_candidate_limit)
    ).all()

    scored = []
    for candidate in candidates:
        score = len(terms & _significant_terms(candidate.title))
        if score >= settings.min_similar_terms:
            scored.append((score, candidate))

    scored.sort(key=lambda pair: (-pair[0], -(pair[1].id or 0)))
    return [candidate for _, candidate in scored[:settings.max_similar_results]]


def post_numbers(session: Session, topic: Topic) -> List[int]:
    return post_service.post_numbers(session, topic)


def by_newest(session: Session) -> List[Topic]:
    """All topics, most recently created first."""
    return list(session.exec(
        select(Topic).order_by(Topic.created_at.desc(), Topic.id.desc())  # type: ignore[attr-defined]
    ).all())


def secure_category(topic: Topic) -> bool:
    return bool(topic.category is not None and topic.category.secure)


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------

def update_meta_data(session: Session, topic: Topic, data: dict) -> Topic:
    """Merge keys into the topic's meta data."""
    merged = dict(topic.meta_data or {})
    merged.update({str(key): value for key, value in data.items()})
    topic.meta_data = merged
    return save_topic(session, topic)


def change_category(session: Session, topic: Topic, name: Optional[str]) -> bool:
    """
    Move a topic to the category with the given name.

    A blank name removes the category. An unknown name leaves the topic
    untouched and returns False.
    """
    if not name:
        if topic.category_id is not None:
            old_category = session.get(Category, topic.category_id)
            if old_category is not None:
                old_category.topic_count = max((old_category.topic_count or 0) - 1, 0)
                session.add(old_category)
            topic.category = None
            topic.category_id = None
        save_topic(session, topic)
        return True

    category = session.exec(select(Category).where(Category.name == name)).first()
    if category is None:
        return False

    if category.id == topic.category_id:
        save_topic(session, topic)
        return True

    if topic.category_id is not None:
        old_category = session.get(Category, topic.category_id)
        if old_category is not None:
            old_category.topic_count = max((old_category.topic_count or 0) - 1, 0)
            session.add(old_category)

    category.topic_count = (category.topic_count or 0) + 1
    session.add(category)
    topic.category = category
    topic.category_id = category.id
    save_topic(session, topic)
    logger.info(f"Moved topic {topic.id} to category {category.id}")
    return True


def add_moderator_post(
    session: Session,
    topic: Topic,
    user: User,
    text: str,
    post_number: Optional[int] = None,
    bump: bool = False,
    commit: bool = True,
) -> Post:
    """Add a small-action post by a moderator explaining a change to the topic."""
    return post_service.create_post(
        session, user, topic, text,
        post_type=PostType.MODERATOR_ACTION,
        post_number=post_number,
        bump=bump,
        commit=commit,
    )


def update_status(session: Session, topic: Topic, status: str, enabled: bool, user: User) -> Topic:
    """
    Toggle one of the topic's statuses and leave a moderator post about it.

    Only re-opening a closed topic bumps it.

    Raises:
        InvalidParameters: If the status is unknown
    """
    try:
        status = TopicStatus(status)
    except ValueError:
        raise InvalidParameters("status", f"Unknown topic status: {status}")

    enabled = bool(enabled)
    closing_status = status in (TopicStatus.CLOSED, TopicStatus.AUTOCLOSED)

    if status == TopicStatus.VISIBLE:
        topic.visible = enabled
    elif status == TopicStatus.PINNED:
        topic.pinned_at = datetime.utcnow() if enabled else None
    elif status == TopicStatus.ARCHIVED:
        topic.archived = enabled
    else:
        topic.closed = enabled
        if enabled:
            topic.auto_close_at = None

    save_topic(session, topic, commit=False)

    message = STATUS_MESSAGES[(status, enabled)]
    if status == TopicStatus.AUTOCLOSED and enabled:
        days = max((datetime.utcnow() - topic.created_at).days, 1)
        message = message.format(days=days)

    add_moderator_post(session, topic, user, message, bump=closing_status and not enabled, commit=False)
    session.commit()
    session.refresh(topic)

    logger.info(f"User {user.id} set {status.value}={enabled} on topic {topic.id}")
    return topic


def toggle_star(session: Session, topic: Topic, user: User, starred: bool) -> Topic:
    """
    Star or unstar a topic for a user.

    Stars are rate limited; removing a star gives the slot back.
    """
    limiter = favorite_limiter(session, user)
    now = datetime.utcnow()

    if starred:
        limiter.performed()
        topic_user_service.change(session, user, topic.id, starred=True, starred_at=now, unstarred_at=None)
        topic.star_count = (topic.star_count or 0) + 1
        user_action_service.log_action(session, UserActionType.STAR, user.id, topic_id=topic.id)
    else:
        limiter.rollback()
        topic_user_service.change(session, user, topic.id, starred=False, unstarred_at=now)
        topic.star_count = max((topic.star_count or 0) - 1, 0)
        user_action_service.remove_action(session, UserActionType.STAR, user.id, topic_id=topic.id)

    session.add(topic)
    session.commit()
    session.refresh(topic)
    return topic


# ---------------------------------------------------------------------------
# Invitations
# ---------------------------------------------------------------------------

def invite(session: Session, topic: Topic, invited_by: User, username_or_email: str) -> Union[bool, Invite]:
    """
    Invite someone to a topic.

    Existing users are added to private messages directly. Otherwise an
    email address gets an email invite and anything else is rejected.

    Returns:
        True when a user was added, the Invite when one was emailed, False otherwise
    """
    value = (username_or_email or "").strip()
    if not value:
        return False

    if topic.private_message:
        user = session.exec(
            select(User).where(
                or_(User.username == value, func.lower(User.email) == value.lower())
            )
        ).first()
        if user is not None:
            _allow_user(session, topic, user, invited_by)
            session.commit()
            return True

    if EMAIL_PATTERN.match(value):
        return invite_by_email(session, topic, invited_by, value)
    return False


def invite_by_email(session: Session, topic: Topic, invited_by: User, email: str) -> Invite:
    """Create (or reuse) an invite for an email address and send it."""
    email = email.strip().lower()

    invite_record = session.exec(
        select(Invite).where(Invite.email == email, Invite.redeemed_at.is_(None))
    ).first()
    if invite_record is None:
        invite_record = Invite(email=email, invited_by_id=invited_by.id)
        session.add(invite_record)
        session.flush()

    if session.get(TopicInvite, (topic.id, invite_record.id)) is None:
        session.add(TopicInvite(topic_id=topic.id, invite_id=invite_record.id))

    if topic.private_message:
        user = session.exec(select(User).where(func.lower(User.email) == email)).first()
        if user is not None:
            _allow_user(session, topic, user, invited_by)

    job_service.enqueue(session, "invite_email", invite_id=invite_record.id)
    session.commit()
    session.refresh(invite_record)
    logger.info(f"User {invited_by.id} invited {email} to topic {topic.id}")
    return invite_record


def _allow_user(session: Session, topic: Topic, user: User, invited_by: User) -> None:
    if session.get(TopicAllowedUser, (topic.id, user.id)) is not None:
        return
    session.add(TopicAllowedUser(topic_id=topic.id, user_id=user.id))
    notification_service.notify(
        session, user.id, NotificationType.INVITED_TO_PRIVATE_MESSAGE,
        topic=topic, post_number=1, acting_user=invited_by
    )
    session.flush()
    session.expire(topic, ["allowed_users"])
