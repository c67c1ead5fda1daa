"""Pydantic schemas for the user feed."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from social_api.schemas.post import PostResponse


class FeedQuery(BaseModel):
    """Filtering, sorting and pagination parameters of a feed request."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=20, ge=1, le=20, description="Page size (1-20)")
    offset: int = Field(default=0, ge=0, description="Number of entries to skip")
    sort: Literal["asc", "desc"] = Field(default="desc", description="Order by creation time")
    tags: tuple[str, ...] = Field(
        default=(), max_length=5, description="Posts must carry all of these tags"
    )
    search: str = Field(
        default="", max_length=100, description="Case-insensitive match on title or content"
    )
    since: datetime | None = Field(default=None, description="Earliest creation time (inclusive)")
    until: datetime | None = Field(default=None, description="Latest creation time (inclusive)")

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip whitespace, drop empty entries and duplicates."""
        cleaned = (tag.strip() for tag in v)
        return tuple(dict.fromkeys(tag for tag in cleaned if tag))

    @field_validator("since", "until")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Normalize to UTC; naive timestamps are taken to be UTC already."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @model_validator(mode="after")
    def validate_window(self) -> "FeedQuery":
        """Validate that the time window is not inverted."""
        if self.since and self.until and self.since > self.until:
            msg = "since must not be later than until"
            raise ValueError(msg)
        return self


class FeedItem(PostResponse):
    """A post in a feed, with its author and comment count."""

    author: str = Field(description="Author username")
    comments_count: int = Field(description="Number of comments on the post")


class FeedResponse(BaseModel):
    """A page of feed entries."""

    limit: int = Field(description="Requested page size")
    offset: int = Field(description="Requested offset")
    results: list[FeedItem] = Field(default_factory=list, description="Feed entries")
