"""
Posts endpoint.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from forum.api.v1.endpoints.utils import get_post_or_404, get_topic_or_404, require_user
from forum.core.database import get_session
from forum.models.models import PostActionType
from forum.schemas.post import CreatePostRequest, PostResponse, RevisePostRequest, RevisePostResponse
from forum.services import guardian, post_action_service, post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Reply to a topic."""
    user = require_user(session, user_id)
    topic = get_topic_or_404(session, request.topic_id)
    guardian.ensure_can_create_post(user, topic)
    post = post_service.create_post(session, user, topic, request.raw)
    return PostResponse.model_validate(post)


@router.put("/{post_id}", response_model=RevisePostResponse)
async def revise_post(
    post_id: int,
    request: RevisePostRequest,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Edit a post's text."""
    user = require_user(session, user_id)
    post = get_post_or_404(session, post_id)
    guardian.ensure_can_edit_post(user, post)
    changed = post_service.revise_post(session, post, user, request.raw)
    return RevisePostResponse(post=PostResponse.model_validate(post), changed=changed)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Soft delete a post; deleting the first post deletes the topic."""
    user = require_user(session, user_id)
    post = get_post_or_404(session, post_id)
    guardian.ensure_can_edit_post(user, post)
    post_service.destroy_post(session, post, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=PostResponse)
async def like_post(
    post_id: int,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    user = require_user(session, user_id)
    post = get_post_or_404(session, post_id)
    guardian.ensure_can_see(user, post.topic)
    post_action_service.act(session, user, post, PostActionType.LIKE)
    session.refresh(post)
    return PostResponse.model_validate(post)


@router.delete("/{post_id}/like", response_model=PostResponse)
async def unlike_post(
    post_id: int,
    user_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    user = require_user(session, user_id)
    post = get_post_or_404(session, post_id)
    guardian.ensure_can_see(user, post.topic)
    post_action_service.remove_act(session, user, post, PostActionType.LIKE)
    session.refresh(post)
    return PostResponse.model_validate(post)
