"""Follower edge ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, PrimaryKeyConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base, utc_now


class Follower(Base):
    """Directed edge: ``follower_id`` follows ``user_id``."""

    __tablename__ = "followers"
    __table_args__ = (PrimaryKeyConstraint("user_id", "follower_id", name="pk_followers"),)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    follower_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, server_default=func.now()
    )
