"""
Topic query service - topic listings as seen by a user.
"""
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy import case, or_

from forum.models.models import Archetype, Category, Topic, User
from forum.services.guardian import is_staff


def list_latest(session: Session, user: Optional[User] = None, limit: int = 30, offset: int = 0) -> List[Topic]:
    """
    Latest regular topics, pinned ones first, then by bump time.

    Private messages are never listed. Invisible topics and topics in secure
    categories are only listed for staff.
    """
    query = (
        select(Topic)
        .outerjoin(Category, Category.id == Topic.category_id)
        .where(
            Topic.archetype == Archetype.REGULAR.value,
            Topic.deleted_at.is_(None),
        )
    )
    if not is_staff(user):
        query = query.where(
            Topic.visible == True,  # noqa: E712
            or_(Topic.category_id.is_(None), Category.secure == False),  # type: ignore[union-attr]  # noqa: E712
        )

    pinned_first = case((Topic.pinned_at.is_(None), 1), else_=0)  # type: ignore[union-attr]
    query = query.order_by(pinned_first, Topic.bumped_at.desc(), Topic.id.desc())  # type: ignore[union-attr]
    return list(session.exec(query.offset(offset).limit(limit)).all())
