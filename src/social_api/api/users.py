"""User, follower and feed API endpoints."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from social_api.api.deps import get_storage
from social_api.schemas.feed import FeedItem, FeedQuery, FeedResponse
from social_api.schemas.post import PostResponse
from social_api.schemas.user import FollowRequest, UserResponse
from social_api.store import FeedEntry, Storage

router = APIRouter(prefix="/users", tags=["users"])


def feed_query(
    limit: int = Query(20, ge=1, le=20, description="Page size"),
    offset: int = Query(0, ge=0, description="Number of entries to skip"),
    sort: Literal["asc", "desc"] = Query("desc", description="Order by creation time"),
    tags: str | None = Query(None, description="Comma-separated tags, at most 5"),
    search: str = Query("", max_length=100, description="Search title and content"),
    since: datetime | None = Query(None, description="Earliest creation time"),
    until: datetime | None = Query(None, description="Latest creation time"),
) -> FeedQuery:
    """Build a FeedQuery from query string parameters."""
    try:
        return FeedQuery(
            limit=limit,
            offset=offset,
            sort=sort,
            tags=tuple(tags.split(",")) if tags else (),
            search=search,
            since=since,
            until=until,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e


def feed_entry_to_item(entry: FeedEntry) -> FeedItem:
    """Convert a storage feed entry to the FeedItem schema."""
    post = PostResponse.model_validate(entry.post)
    return FeedItem(
        **post.model_dump(),
        author=entry.author_username,
        comments_count=entry.comments_count,
    )


@router.put("/activate/{token}", status_code=204)
async def activate_user(
    token: str,
    storage: Storage = Depends(get_storage),
) -> None:
    """Activate the account owning an invitation token.

    Raises:
        HTTPException 404: If the token is unknown or expired
    """
    await storage.invitations.activate(token)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    """Get a user's public profile."""
    user = await storage.users.get(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}/follow", status_code=204)
async def follow_user(
    user_id: int,
    payload: FollowRequest,
    storage: Storage = Depends(get_storage),
) -> None:
    """Make the path user follow ``payload.user_id``.

    Raises:
        HTTPException 404: If either user does not exist
        HTTPException 409: If the path user already follows the target
        HTTPException 400: If both ids are the same user
    """
    await storage.users.get(user_id)
    await storage.users.get(payload.user_id)
    await storage.followers.follow(user_id, payload.user_id)


@router.put("/{user_id}/unfollow", status_code=204)
async def unfollow_user(
    user_id: int,
    payload: FollowRequest,
    storage: Storage = Depends(get_storage),
) -> None:
    """Make the path user stop following ``payload.user_id``.

    Unfollowing someone who is not followed is a no-op.
    """
    await storage.users.get(user_id)
    await storage.followers.unfollow(user_id, payload.user_id)


@router.get("/{user_id}/feed", response_model=FeedResponse)
async def get_user_feed(
    user_id: int,
    query: FeedQuery = Depends(feed_query),
    storage: Storage = Depends(get_storage),
) -> FeedResponse:
    """Get the feed of a user: their posts and those of everyone they follow."""
    await storage.users.get(user_id)
    entries = await storage.feed.get_user_feed(user_id, query)
    return FeedResponse(
        limit=query.limit,
        offset=query.offset,
        results=[feed_entry_to_item(entry) for entry in entries],
    )
