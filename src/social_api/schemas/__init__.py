"""Pydantic schemas for request/response validation."""

from social_api.schemas.feed import FeedItem, FeedQuery, FeedResponse
from social_api.schemas.post import (
    CommentAuthor,
    CommentCreate,
    CommentResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    PostWithComments,
)
from social_api.schemas.user import FollowRequest, UserCreate, UserResponse

__all__ = [
    # Feed schemas
    "FeedQuery",
    "FeedItem",
    "FeedResponse",
    # Post schemas
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostWithComments",
    "CommentAuthor",
    "CommentCreate",
    "CommentResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
    "FollowRequest",
]
