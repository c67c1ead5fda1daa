"""User invitation ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from social_api.database import Base


class UserInvitation(Base):
    """Pending activation for a user.

    Only the SHA-512 hex digest of the issued token is stored; the raw token
    travels out-of-band to the user.
    """

    __tablename__ = "user_invitations"
    __table_args__ = (UniqueConstraint("user_id", name="uq_user_invitations_user_id"),)

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
