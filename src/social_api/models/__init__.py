"""SQLAlchemy ORM models."""

from social_api.models.comment import Comment
from social_api.models.follower import Follower
from social_api.models.invitation import UserInvitation
from social_api.models.post import Post, PostTag
from social_api.models.user import User

__all__ = [
    "Comment",
    "Follower",
    "Post",
    "PostTag",
    "User",
    "UserInvitation",
]
