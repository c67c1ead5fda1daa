"""Post and comment API endpoints."""

from fastapi import APIRouter, Depends

from social_api.api.deps import get_storage
from social_api.schemas.post import (
    CommentCreate,
    CommentResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    PostWithComments,
)
from social_api.store import Storage

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    post_data: PostCreate,
    storage: Storage = Depends(get_storage),
) -> PostResponse:
    """Create a new post.

    Raises:
        HTTPException 404: If the author does not exist
    """
    await storage.users.get(post_data.user_id)
    post = await storage.posts.create(
        user_id=post_data.user_id,
        title=post_data.title,
        content=post_data.content,
        tags=post_data.tags,
    )
    return PostResponse.model_validate(post)


@router.get("/{post_id}", response_model=PostWithComments)
async def get_post(
    post_id: int,
    storage: Storage = Depends(get_storage),
) -> PostWithComments:
    """Get a post with its comments, newest comment first."""
    post = await storage.posts.get_by_id(post_id)
    comments = await storage.comments.get_by_post_id(post_id)
    return PostWithComments(
        **PostResponse.model_validate(post).model_dump(),
        comments=[CommentResponse.model_validate(comment) for comment in comments],
    )


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    storage: Storage = Depends(get_storage),
) -> PostResponse:
    """Update a post's title and/or content.

    The request carries the version the client last read. The update only
    applies if that version is still current.

    Raises:
        HTTPException 404: If the post does not exist
        HTTPException 409: If the post was modified since that version
    """
    post = await storage.posts.get_by_id(post_id)
    await storage.posts.update(
        post_id,
        title=post_data.title if post_data.title is not None else post.title,
        content=post_data.content if post_data.content is not None else post.content,
        version=post_data.version,
    )
    updated = await storage.posts.get_by_id(post_id)
    return PostResponse.model_validate(updated)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: int,
    storage: Storage = Depends(get_storage),
) -> None:
    """Delete a post with its tags and comments."""
    await storage.posts.delete(post_id)


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    storage: Storage = Depends(get_storage),
) -> CommentResponse:
    """Add a comment to a post.

    Raises:
        HTTPException 404: If the post or the author does not exist
    """
    await storage.posts.get_by_id(post_id)
    await storage.users.get(comment_data.user_id)
    comment = await storage.comments.create(
        post_id=post_id,
        user_id=comment_data.user_id,
        content=comment_data.content,
    )
    return CommentResponse.model_validate(comment)
