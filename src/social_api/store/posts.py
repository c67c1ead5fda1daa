"""Post repository with optimistic concurrency control."""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select, update

from social_api.database import utc_now
from social_api.models.post import Post, PostTag
from social_api.store.base import Repository
from social_api.store.errors import NotFoundError, VersionConflictError

logger = logging.getLogger(__name__)


class PostRepository(Repository):
    """CRUD for posts.

    Every successful update bumps ``version`` by exactly one. Concurrent
    writers are arbitrated by the conditional update alone; no row is locked
    between a read and the following update.
    """

    async def create(
        self, *, user_id: int, title: str, content: str, tags: Iterable[str] = ()
    ) -> Post:
        """Create a post; duplicate tags are dropped, first occurrence wins."""
        unique_tags = list(dict.fromkeys(tags))
        post = Post(
            user_id=user_id,
            title=title,
            content=content,
            post_tags=[PostTag(tag=tag, position=i) for i, tag in enumerate(unique_tags)],
        )
        async with self.transaction("create post") as session:
            session.add(post)
            await session.flush()
            await session.refresh(post)
        return post

    async def get_by_id(self, post_id: int) -> Post:
        """Fetch a post by id.

        Raises:
            NotFoundError: If no post has this id.
        """
        async with self.transaction("get post") as session:
            post = await session.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    async def update(self, post_id: int, *, title: str, content: str, version: int) -> int:
        """Update title and content if ``version`` is still current.

        Returns:
            The new version (``version + 1``).

        Raises:
            NotFoundError: If the post does not exist.
            VersionConflictError: If the post exists with a different version.
        """
        async with self.transaction("update post") as session:
            query = (
                update(Post)
                .where(Post.id == post_id, Post.version == version)
                .values(
                    title=title,
                    content=content,
                    version=Post.version + 1,
                    updated_at=utc_now(),
                )
                .returning(Post.version)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(query)
            new_version = result.scalar_one_or_none()

            if new_version is None:
                exists = await session.scalar(select(Post.id).where(Post.id == post_id))
                if exists is None:
                    raise NotFoundError(f"Post {post_id} not found")
                logger.info("Rejected stale update of post %s at version %s", post_id, version)
                raise VersionConflictError()

        return new_version

    async def delete(self, post_id: int) -> None:
        """Delete a post along with its tags and comments.

        Raises:
            NotFoundError: If no post has this id.
        """
        async with self.transaction("delete post") as session:
            result = await session.execute(
                delete(Post)
                .where(Post.id == post_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Post {post_id} not found")
