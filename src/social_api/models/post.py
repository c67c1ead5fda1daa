"""Post and post tag ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from social_api.database import Base, utc_now


class Post(Base):
    """User post, versioned for optimistic concurrency."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    content: Mapped[str] = mapped_column(Text)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now()
    )
    version: Mapped[int] = mapped_column(server_default="1")

    # Relationships
    post_tags: Mapped[list[PostTag]] = relationship(
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PostTag.position",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        """Tags in the order they were given."""
        return [post_tag.tag for post_tag in self.post_tags]


class PostTag(Base):
    """One tag of a post; ``position`` keeps the caller's ordering."""

    __tablename__ = "post_tags"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    tag: Mapped[str] = mapped_column(String(50), primary_key=True, index=True)
    position: Mapped[int] = mapped_column()
