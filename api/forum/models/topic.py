"""
Topic model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import Column, JSON
from forum.core.config import settings
from forum.models.enums import Archetype
from forum.models.topic_allowed_user import TopicAllowedUser
from forum.models.invite import TopicInvite
from forum.utils.text_utils import slug_for, fancy_title as fancify

if TYPE_CHECKING:
    from forum.models.user import User
    from forum.models.category import Category
    from forum.models.post import Post
    from forum.models.topic_user import TopicUser
    from forum.models.topic_link import TopicLink
    from forum.models.invite import Invite
    from forum.models.topic_revision import TopicRevision


def _user_fk(column: str) -> dict:
    return {"foreign_keys": f"Topic.{column}", "lazy": "selectin"}


class Topic(SQLModel, table=True):
    """Topic table - a discussion thread made of posts."""
    __tablename__ = "topic"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255)
    archetype: str = Field(default=Archetype.REGULAR.value, index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")  # Creator
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)

    # Denormalized summary of the posts
    last_post_user_id: Optional[int] = Field(default=None, foreign_key="user.id")
    featured_user1_id: Optional[int] = Field(default=None, foreign_key="user.id")
    featured_user2_id: Optional[int] = Field(default=None, foreign_key="user.id")
    featured_user3_id: Optional[int] = Field(default=None, foreign_key="user.id")
    featured_user4_id: Optional[int] = Field(default=None, foreign_key="user.id")
    posts_count: int = Field(default=0)
    highest_post_number: int = Field(default=0)
    like_count: int = Field(default=0)
    star_count: int = Field(default=0)
    moderator_posts_count: int = Field(default=0)
    views: int = Field(default=0)

    # Status flags
    visible: bool = Field(default=True)
    closed: bool = Field(default=False)
    archived: bool = Field(default=False)
    pinned_at: Optional[datetime] = None
    has_best_of: bool = Field(default=False)
    percent_rank: float = Field(default=1.0)

    bumped_at: Optional[datetime] = Field(default=None, index=True)
    last_posted_at: Optional[datetime] = None
    version: int = Field(default=1)
    meta_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    auto_close_at: Optional[datetime] = None
    auto_close_user_id: Optional[int] = Field(default=None, foreign_key="user.id")

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None

    # Relationships
    category: Optional["Category"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    user: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("user_id"))
    last_poster: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("last_post_user_id"))
    featured_user1: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("featured_user1_id"))
    featured_user2: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("featured_user2_id"))
    featured_user3: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("featured_user3_id"))
    featured_user4: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("featured_user4_id"))
    auto_close_user: Optional["User"] = Relationship(sa_relationship_kwargs=_user_fk("auto_close_user_id"))

    posts: List["Post"] = Relationship(
        sa_relationship_kwargs={
            "primaryjoin": "and_(Topic.id == Post.topic_id, Post.deleted_at.is_(None))",
            "order_by": "Post.sort_order",
            "viewonly": True,
        }
    )
    topic_users: List["TopicUser"] = Relationship(back_populates="topic")
    topic_links: List["TopicLink"] = Relationship(back_populates="topic")
    topic_allowed_users: List["TopicAllowedUser"] = Relationship(back_populates="topic")
    allowed_users: List["User"] = Relationship(
        link_model=TopicAllowedUser,
        sa_relationship_kwargs={"viewonly": True},
    )
    invites: List["Invite"] = Relationship(
        link_model=TopicInvite,
        sa_relationship_kwargs={"viewonly": True},
    )
    revisions: List["TopicRevision"] = Relationship(
        back_populates="topic",
        sa_relationship_kwargs={"order_by": "TopicRevision.number"},
    )

    @property
    def slug(self) -> str:
        """URL slug for the title, 'topic' when the title has no usable characters."""
        slug = slug_for(self.title)
        return slug if slug else "topic"

    @property
    def fancy_title(self) -> str:
        if not settings.title_fancy_entities:
            return self.title
        return fancify(self.title)

    @property
    def relative_url(self) -> str:
        return f"/t/{self.slug}/{self.id}"

    @property
    def private_message(self) -> bool:
        return self.archetype == Archetype.PRIVATE_MESSAGE.value

    @property
    def featured_user_ids(self) -> List[int]:
        ids = [self.featured_user1_id, self.featured_user2_id, self.featured_user3_id, self.featured_user4_id]
        return [user_id for user_id in ids if user_id is not None]
