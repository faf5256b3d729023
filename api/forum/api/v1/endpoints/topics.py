"""
Topics endpoint.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session, select

from forum.api.v1.endpoints.utils import get_topic_or_404, get_user_or_none, require_user
from forum.core.database import get_session
from forum.core.exceptions import InvalidParameters, NotFoundError
from forum.models.models import Archetype, Category, User
from forum.schemas.topic import (
    CreateTopicRequest,
    InviteRequest,
    InviteResponse,
    MovePostsRequest,
    SimilarTopicsResponse,
    StarRequest,
    TopicDetailResponse,
    TopicResponse,
    TopicsResponse,
    UpdateStatusRequest,
    UpdateTopicRequest,
)
from forum.services import guardian, post_mover, post_service, topic_query, topic_service, topic_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=TopicsResponse)
async def get_latest_topics(
    user_id: Optional[int] = None,
    limit: int = Query(30, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session)
):
    """Latest topics visible to the user, pinned topics first."""
    user = get_user_or_none(session, user_id)
    topics = topic_query.list_latest(session, user, limit=limit, offset=offset)
    return TopicsResponse(topics=[TopicResponse.model_validate(topic) for topic in topics])


@router.get("/similar", response_model=SimilarTopicsResponse)
async def get_similar_topics(
    title: Optional[str] = None,
    raw: Optional[str] = None,
    session: Session = Depends(get_session)
):
    """Topics similar to a topic being composed."""
    topics = topic_service.similar_to(session, title, raw)
    return SimilarTopicsResponse(topics=[TopicResponse.model_validate(topic) for topic in topics])


@router.get("/{topic_id}", response_model=TopicDetailResponse)
async def get_topic(
    topic_id: int,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    user = get_user_or_none(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_see(user, topic)
    return TopicDetailResponse.model_validate(topic)


@router.post("", response_model=TopicDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    request: CreateTopicRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Create a topic together with its first post."""
    user = require_user(session, user_id)

    category = None
    if request.category_id is not None:
        category = session.get(Category, request.category_id)
        if not category:
            raise NotFoundError(f"Category with id {request.category_id} not found")

    target_users = []
    if request.archetype == Archetype.PRIVATE_MESSAGE:
        if not request.target_usernames:
            raise InvalidParameters("target_usernames", "A private message needs at least one recipient")
        for username in request.target_usernames:
            target = session.exec(select(User).where(User.username == username)).first()
            if not target:
                raise NotFoundError(f"User {username} not found")
            target_users.append(target)

    auto_close_at = None
    if request.auto_close_days:
        auto_close_at = datetime.utcnow() + timedelta(days=request.auto_close_days)

    topic = topic_service.create_topic(
        session, user, request.title,
        category=category,
        archetype=request.archetype.value,
        target_users=target_users,
        auto_close_at=auto_close_at,
        meta_data=request.meta_data,
        commit=False,
    )
    post_service.create_post(session, user, topic, request.raw)
    session.refresh(topic)
    return TopicDetailResponse.model_validate(topic)


@router.put("/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: int,
    request: UpdateTopicRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Update a topic's title, category, auto-close time or meta data."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_edit_topic(user, topic)

    if request.title is not None:
        topic.title = request.title
    if request.clear_auto_close:
        topic.auto_close_at = None
    elif request.auto_close_days:
        topic.auto_close_at = datetime.utcnow() + timedelta(days=request.auto_close_days)
        topic.auto_close_user_id = user.id
    if request.meta_data:
        topic.meta_data = {**(topic.meta_data or {}), **request.meta_data}

    if request.category is not None:
        if not topic_service.change_category(session, topic, request.category):
            raise NotFoundError(f"Category {request.category} not found")
    else:
        topic_service.save_topic(session, topic)

    session.refresh(topic)
    return TopicResponse.model_validate(topic)


@router.put("/{topic_id}/status", response_model=TopicResponse)
async def update_topic_status(
    topic_id: int,
    request: UpdateStatusRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Toggle visible, pinned, archived or closed. Staff only."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_moderate(user, topic)
    topic = topic_service.update_status(session, topic, request.status.value, request.enabled, user)
    return TopicResponse.model_validate(topic)


@router.put("/{topic_id}/star", response_model=TopicResponse)
async def star_topic(
    topic_id: int,
    request: StarRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Star or unstar a topic. Repeating the current state changes nothing."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_see(user, topic)

    topic_user = topic_user_service.get(session, user, topic.id)
    currently_starred = bool(topic_user and topic_user.starred)
    if currently_starred != request.starred:
        topic = topic_service.toggle_star(session, topic, user, request.starred)
    return TopicResponse.model_validate(topic)


@router.post("/{topic_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_topic_read(
    topic_id: int,
    post_number: int = Query(..., ge=1),
    msecs: int = Query(0, ge=0),
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Record how far the user has read the topic."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_see(user, topic)
    topic_user_service.update_last_read(session, user, topic.id, post_number, msecs)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{topic_id}/invite", response_model=InviteResponse)
async def invite_to_topic(
    topic_id: int,
    request: InviteRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Invite a user (private messages) or an email address to a topic."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_invite_to(user, topic)

    result = topic_service.invite(session, topic, user, request.username_or_email)
    if result is False:
        raise InvalidParameters("username_or_email", f"Can't invite {request.username_or_email}")
    if result is True:
        return InviteResponse(success=True)
    return InviteResponse(success=True, invite_key=result.invite_key)


@router.post("/{topic_id}/move-posts", response_model=TopicResponse)
async def move_posts(
    topic_id: int,
    request: MovePostsRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Move posts to a new topic (title) or an existing one (destination_topic_id)."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_move_posts(user, topic)

    destination = post_mover.move_posts(
        session, topic, user, request.post_ids,
        title=request.title,
        destination_topic_id=request.destination_topic_id,
    )
    return TopicResponse.model_validate(destination)


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(
    topic_id: int,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Soft delete a topic. Staff only."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, topic_id)
    guardian.ensure_can_moderate(user, topic)
    topic_service.destroy_topic(session, topic)
    logger.info(f"User {user.id} deleted topic {topic_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
