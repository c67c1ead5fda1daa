"""Pydantic schemas for post and comment API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PostCreate(BaseModel):
    """Schema for creating a post."""

    user_id: int = Field(description="Author user ID")
    title: str = Field(min_length=1, max_length=100, description="Post title")
    content: str = Field(min_length=1, max_length=1000, description="Post body")
    tags: list[str] = Field(default_factory=list, max_length=20, description="Ordered tags")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Validate tags are non-empty and short."""
        for tag in v:
            if not tag.strip() or len(tag) > 50:
                msg = "Tags must be 1-50 characters"
                raise ValueError(msg)
        return [tag.strip() for tag in v]


class PostUpdate(BaseModel):
    """Schema for updating a post.

    ``version`` must be the version the client last read; a stale value is
    rejected with 409.
    """

    title: str | None = Field(default=None, min_length=1, max_length=100)
    content: str | None = Field(default=None, min_length=1, max_length=1000)
    version: int = Field(ge=1, description="Version the update is based on")


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    user_id: int = Field(description="Author user ID")
    content: str = Field(min_length=1, max_length=1000, description="Comment text")


class CommentAuthor(BaseModel):
    """Minimal user info for comment display."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")


class CommentResponse(BaseModel):
    """Response schema for a comment."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Comment ID")
    post_id: int = Field(description="Post ID")
    user_id: int = Field(description="Author user ID")
    content: str = Field(description="Comment text")
    created_at: datetime = Field(description="When the comment was created")
    author: CommentAuthor | None = Field(default=None, description="Author information")


class PostResponse(BaseModel):
    """Response schema for a post."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Post ID")
    user_id: int = Field(description="Author user ID")
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    tags: list[str] = Field(default_factory=list, description="Ordered tags")
    created_at: datetime = Field(description="When the post was created")
    updated_at: datetime = Field(description="When the post was last updated")
    version: int = Field(description="Current version, incremented on every update")


class PostWithComments(PostResponse):
    """Response schema for a single post including its comments."""

    comments: list[CommentResponse] = Field(default_factory=list, description="Comments")
